from typing import Any, Dict, List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from sticktoss.config.settings import get_settings
from sticktoss.engine.errors import TeamGenerationError
from sticktoss.engine.partitioner import generate_teams
from sticktoss.models.entities import ConstraintGroup, Participant, Partition, Team
from sticktoss.storage.cache import GameCache, get_cache
from sticktoss.storage.database import GroupModel, PlayerModel, get_db
from sticktoss.storage.repositories import GameRepository, GroupRepository, PlayerRepository
from sticktoss.utils.scoring import weight_spread
from sticktoss.utils.share_id import generate_share_id

router = APIRouter()
settings = get_settings()
logger = logging.getLogger(__name__)


class PlayerIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    skill_weight: int = Field(..., ge=1, le=5)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class PlayerOut(BaseModel):
    id: int
    name: str
    skill_weight: int

    @classmethod
    def from_model(cls, m: PlayerModel) -> "PlayerOut":
        return cls(id=m.id, name=m.name, skill_weight=m.skill_weight)


class ParticipantDTO(BaseModel):
    id: int
    name: str = ""
    skill_weight: int = Field(..., ge=1, le=5)

    def to_domain(self) -> Participant:
        return Participant(id=self.id, skill_weight=self.skill_weight, name=self.name)


class TeamDTO(BaseModel):
    number: int
    players: List[PlayerOut]
    total_weight: int

    @classmethod
    def from_domain(cls, team: Team) -> "TeamDTO":
        return cls(
            number=team.number,
            players=[PlayerOut(id=p.id, name=p.name, skill_weight=p.skill_weight) for p in team.players],
            total_weight=team.total_weight,
        )


class GroupIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class GroupOut(BaseModel):
    id: int
    name: str
    players: List[PlayerOut] = []

    @classmethod
    def from_model(cls, m: GroupModel, include_players: bool = True) -> "GroupOut":
        players = [PlayerOut.from_model(p) for p in m.players] if include_players else []
        return cls(id=m.id, name=m.name, players=players)


class AddPlayerRequest(BaseModel):
    player_id: int


class TeamOptions(BaseModel):
    num_teams: int
    locked_players: List[List[int]] = []
    separated_players: List[List[int]] = []


class GenerateRequest(TeamOptions):
    participants: List[ParticipantDTO] = Field(..., min_length=1)

    @field_validator("participants")
    @classmethod
    def unique_ids(cls, v: List[ParticipantDTO]):
        ids = [p.id for p in v]
        if len(ids) != len(set(ids)):
            raise ValueError("participant ids must be unique")
        return v


class GenerateResponse(BaseModel):
    teams: List[TeamDTO]
    spread: int


class GroupGenerateRequest(TeamOptions):
    use_jersey_colors: bool = False


class GroupGenerateResponse(BaseModel):
    teams: List[TeamDTO]
    share_id: str


class GameResponse(BaseModel):
    share_id: str
    group_name: str
    num_teams: int
    use_jersey_colors: bool
    teams: List[TeamDTO]
    created_at: Optional[str] = None


def _run_generator(participants: List[Participant], opts: TeamOptions) -> Partition:
    try:
        return generate_teams(
            participants,
            opts.num_teams,
            constraints=[ConstraintGroup.lock(g) for g in opts.locked_players]
            + [ConstraintGroup.separate(g) for g in opts.separated_players],
        )
    except TeamGenerationError as exc:
        logger.warning(f"Team generation rejected ({exc.kind}): {exc.message}")
        raise HTTPException(status_code=400, detail=exc.to_dict())


def _new_share_id(games: GameRepository) -> str:
    share_id = generate_share_id(settings.share_id_length)
    while games.exists(share_id):
        share_id = generate_share_id(settings.share_id_length)
    return share_id


def _get_group_or_404(groups: GroupRepository, group_id: int) -> GroupModel:
    group = groups.get_by_id(group_id)
    if not group:
        raise HTTPException(status_code=404, detail="group not found")
    return group


def _get_player_or_404(players: PlayerRepository, player_id: int) -> PlayerModel:
    player = players.get_by_id(player_id)
    if not player:
        raise HTTPException(status_code=404, detail="player not found")
    return player


@router.post("/teams/generate", response_model=GenerateResponse, summary="Generate balanced teams")
def generate(req: GenerateRequest):
    """
    Split an ad-hoc roster into balanced teams without touching storage.

    **Constraints:**
    - `locked_players`: each inner list must share a team; list i lands on team i+1
    - `separated_players`: each inner list is spread over different teams

    **Error Handling:**
    - 400: request cannot be satisfied (`detail.kind` names the reason)
    - 422: malformed body (skill weight outside 1-5, duplicate ids, ...)
    """
    logger.info(f"Generate request: {len(req.participants)} players, {req.num_teams} teams")
    partition = _run_generator([p.to_domain() for p in req.participants], req)
    return {
        "teams": [TeamDTO.from_domain(t) for t in partition],
        "spread": weight_spread(partition),
    }


@router.get("/players", response_model=List[PlayerOut])
def list_players(db: Session = Depends(get_db)):
    return [PlayerOut.from_model(p) for p in PlayerRepository(db).list_all()]


@router.post("/players", response_model=PlayerOut, status_code=201)
def create_player(req: PlayerIn, db: Session = Depends(get_db)):
    player = PlayerRepository(db).create(req.name, req.skill_weight)
    logger.info(f"Created player {player.id}")
    return PlayerOut.from_model(player)


@router.get("/players/{player_id}", response_model=PlayerOut)
def get_player(player_id: int, db: Session = Depends(get_db)):
    return PlayerOut.from_model(_get_player_or_404(PlayerRepository(db), player_id))


@router.put("/players/{player_id}", response_model=PlayerOut)
def update_player(player_id: int, req: PlayerIn, db: Session = Depends(get_db)):
    player = PlayerRepository(db).update(player_id, req.name, req.skill_weight)
    if not player:
        raise HTTPException(status_code=404, detail="player not found")
    return PlayerOut.from_model(player)


@router.delete("/players/{player_id}")
def delete_player(player_id: int, db: Session = Depends(get_db)):
    if not PlayerRepository(db).delete(player_id):
        raise HTTPException(status_code=404, detail="player not found")
    return {"message": "player deleted"}


@router.get("/groups", response_model=List[GroupOut])
def list_groups(db: Session = Depends(get_db)):
    return [GroupOut.from_model(g, include_players=False) for g in GroupRepository(db).list_all()]


@router.post("/groups", response_model=GroupOut, status_code=201)
def create_group(req: GroupIn, db: Session = Depends(get_db)):
    group = GroupRepository(db).create(req.name)
    logger.info(f"Created group {group.id}")
    return GroupOut.from_model(group)


@router.get("/groups/{group_id}", response_model=GroupOut)
def get_group(group_id: int, db: Session = Depends(get_db)):
    return GroupOut.from_model(_get_group_or_404(GroupRepository(db), group_id))


@router.put("/groups/{group_id}", response_model=GroupOut)
def rename_group(group_id: int, req: GroupIn, db: Session = Depends(get_db)):
    group = GroupRepository(db).rename(group_id, req.name)
    if not group:
        raise HTTPException(status_code=404, detail="group not found")
    return GroupOut.from_model(group)


@router.delete("/groups/{group_id}")
def delete_group(group_id: int, db: Session = Depends(get_db)):
    if not GroupRepository(db).delete(group_id):
        raise HTTPException(status_code=404, detail="group not found")
    return {"message": "group deleted"}


@router.post("/groups/{group_id}/players")
def add_player_to_group(group_id: int, req: AddPlayerRequest, db: Session = Depends(get_db)):
    groups = GroupRepository(db)
    group = _get_group_or_404(groups, group_id)
    player = _get_player_or_404(PlayerRepository(db), req.player_id)
    groups.add_player(group, player)
    return {"message": "player added to group"}


@router.delete("/groups/{group_id}/players/{player_id}")
def remove_player_from_group(group_id: int, player_id: int, db: Session = Depends(get_db)):
    groups = GroupRepository(db)
    group = _get_group_or_404(groups, group_id)
    player = _get_player_or_404(PlayerRepository(db), player_id)
    groups.remove_player(group, player)
    return {"message": "player removed from group"}


@router.post("/groups/{group_id}/generate", response_model=GroupGenerateResponse, summary="Generate and save a game")
def generate_for_group(
    group_id: int,
    req: GroupGenerateRequest,
    db: Session = Depends(get_db),
    cache: GameCache = Depends(get_cache),
):
    """
    Generate teams from a group's roster and store them as a shareable game.

    **Returns:**
    - `teams`: the generated teams
    - `share_id`: public id for `GET /games/{share_id}`
    """
    groups = GroupRepository(db)
    group = _get_group_or_404(groups, group_id)
    participants = groups.participants(group)
    if not participants:
        raise HTTPException(status_code=400, detail="group has no players")
    if len(participants) < req.num_teams:
        raise HTTPException(status_code=400, detail="not enough players for the requested number of teams")

    partition = _run_generator(participants, req)
    teams = [TeamDTO.from_domain(t) for t in partition]

    games = GameRepository(db)
    share_id = _new_share_id(games)
    games.save(
        share_id=share_id,
        group=group,
        num_teams=req.num_teams,
        use_jersey_colors=req.use_jersey_colors,
        teams_data=[t.model_dump() for t in teams],
    )
    cache.set(share_id, games.get_by_share_id(share_id))
    logger.info(f"Saved game {share_id} for group {group_id}")

    return {"teams": teams, "share_id": share_id}


@router.get("/games/{share_id}", response_model=GameResponse, summary="Fetch a shared game")
def get_game(share_id: str, db: Session = Depends(get_db), cache: GameCache = Depends(get_cache)):
    cached: Optional[Dict[str, Any]] = cache.get(share_id)
    if cached:
        logger.debug(f"Cache hit for game {share_id}")
        return cached

    snapshot = GameRepository(db).get_by_share_id(share_id)
    if snapshot is None:
        raise HTTPException(status_code=404, detail="game not found")
    cache.set(share_id, snapshot)
    return snapshot
