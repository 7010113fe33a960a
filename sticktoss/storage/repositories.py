from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from sticktoss.models.entities import Participant
from sticktoss.storage.database import GameModel, GroupModel, PlayerModel


class PlayerRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, player_id: int) -> Optional[PlayerModel]:
        return self.db.query(PlayerModel).filter(PlayerModel.id == player_id).first()

    def list_all(self) -> List[PlayerModel]:
        return self.db.query(PlayerModel).order_by(PlayerModel.id).all()

    def create(self, name: str, skill_weight: int) -> PlayerModel:
        model = PlayerModel(name=name, skill_weight=skill_weight)
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        return model

    def update(self, player_id: int, name: str, skill_weight: int) -> Optional[PlayerModel]:
        existing = self.get_by_id(player_id)
        if not existing:
            return None
        existing.name = name
        existing.skill_weight = skill_weight
        self.db.commit()
        self.db.refresh(existing)
        return existing

    def delete(self, player_id: int) -> bool:
        existing = self.get_by_id(player_id)
        if not existing:
            return False
        # Session delete also clears group memberships
        self.db.delete(existing)
        self.db.commit()
        return True

    @staticmethod
    def model_to_participant(model: PlayerModel) -> Participant:
        return Participant(id=model.id, skill_weight=model.skill_weight, name=model.name)


class GroupRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, group_id: int) -> Optional[GroupModel]:
        return self.db.query(GroupModel).filter(GroupModel.id == group_id).first()

    def list_all(self) -> List[GroupModel]:
        return self.db.query(GroupModel).order_by(GroupModel.id).all()

    def create(self, name: str) -> GroupModel:
        model = GroupModel(name=name)
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        return model

    def rename(self, group_id: int, name: str) -> Optional[GroupModel]:
        existing = self.get_by_id(group_id)
        if not existing:
            return None
        existing.name = name
        self.db.commit()
        self.db.refresh(existing)
        return existing

    def delete(self, group_id: int) -> bool:
        existing = self.get_by_id(group_id)
        if not existing:
            return False
        self.db.delete(existing)
        self.db.commit()
        return True

    def add_player(self, group: GroupModel, player: PlayerModel) -> None:
        if player not in group.players:
            group.players.append(player)
            self.db.commit()

    def remove_player(self, group: GroupModel, player: PlayerModel) -> None:
        if player in group.players:
            group.players.remove(player)
            self.db.commit()

    def participants(self, group: GroupModel) -> List[Participant]:
        return [PlayerRepository.model_to_participant(p) for p in group.players]


class GameRepository:
    def __init__(self, db: Session):
        self.db = db

    def save(
        self,
        share_id: str,
        group: GroupModel,
        num_teams: int,
        use_jersey_colors: bool,
        teams_data: List[Dict],
    ) -> GameModel:
        model = GameModel(
            share_id=share_id,
            group_id=group.id,
            group_name=group.name,
            num_teams=num_teams,
            use_jersey_colors=use_jersey_colors,
            teams_data=teams_data,
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        return model

    def exists(self, share_id: str) -> bool:
        return self.db.query(GameModel.share_id).filter(GameModel.share_id == share_id).first() is not None

    def get_by_share_id(self, share_id: str) -> Optional[Dict]:
        model = self.db.query(GameModel).filter(GameModel.share_id == share_id).first()
        if not model:
            return None
        return self._model_to_snapshot(model)

    @staticmethod
    def _model_to_snapshot(model: GameModel) -> Dict:
        return {
            "share_id": model.share_id,
            "group_name": model.group_name,
            "num_teams": model.num_teams,
            "use_jersey_colors": model.use_jersey_colors,
            "teams": model.teams_data,
            "created_at": model.created_at.isoformat() if model.created_at else None,
        }
