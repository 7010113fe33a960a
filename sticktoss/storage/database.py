from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker
from sqlalchemy.pool import StaticPool

from sticktoss.config.settings import SHARE_ID_MAX_LENGTH, get_settings

settings = get_settings()


def make_engine(url: str):
    if url.startswith("sqlite"):
        # In-memory SQLite must share one connection across threads
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=False,
        )
    return create_engine(url, pool_pre_ping=True, echo=False)


engine = make_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


group_players = Table(
    "group_players",
    Base.metadata,
    Column("group_id", Integer, ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True),
    Column("player_id", Integer, ForeignKey("players.id", ondelete="CASCADE"), primary_key=True),
)


class PlayerModel(Base):
    __tablename__ = "players"
    __table_args__ = (
        CheckConstraint("skill_weight >= 1 AND skill_weight <= 5", name="ck_players_skill_weight"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    skill_weight = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    groups = relationship("GroupModel", secondary=group_players, back_populates="players")


class GroupModel(Base):
    __tablename__ = "groups"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    players = relationship("PlayerModel", secondary=group_players, back_populates="groups", order_by="PlayerModel.id")


class GameModel(Base):
    __tablename__ = "games"

    share_id = Column(String(SHARE_ID_MAX_LENGTH), primary_key=True)
    group_id = Column(Integer, nullable=False, index=True)
    group_name = Column(String(255), nullable=False)
    num_teams = Column(Integer, nullable=False)
    use_jersey_colors = Column(Boolean, default=False, nullable=False)
    teams_data = Column(JSON, nullable=False)  # List[{number, players, total_weight}]
    created_at = Column(DateTime, default=datetime.utcnow)


def init_db(bind=None):
    Base.metadata.create_all(bind=bind or engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
