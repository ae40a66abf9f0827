from uuid import uuid4

from sqlalchemy.exc import OperationalError

from app.models import Reward
from app.services.reward_service import RewardService, reward_service


class BrokenSession:
    def query(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection reset"))

    def rollback(self) -> None:
        pass


def test_total_is_zero_without_rewards(db_session) -> None:
    assert reward_service.get_total_rewards(db_session) == 0


def test_total_sums_all_rewards(db_session) -> None:
    for minutes in (26, 18, 5):
        db_session.add(Reward(material_id=uuid4(), minutes=minutes))
    db_session.commit()

    assert reward_service.get_total_rewards(db_session) == 49


def test_total_degrades_to_zero_on_storage_error() -> None:
    assert reward_service.get_total_rewards(BrokenSession()) == 0


def test_grant_once_is_idempotent(db_session) -> None:
    material_id = uuid4()

    assert reward_service.grant_once(db_session, material_id, 26) == 26
    assert reward_service.grant_once(db_session, material_id, 26) == 0
    assert reward_service.grant_once(db_session, material_id, 99) == 0

    reward = db_session.query(Reward).one()
    assert reward.minutes == 26
    assert reward.claimed is False


def test_concurrent_insert_loses_to_unique_constraint(db_session, monkeypatch) -> None:
    material_id = uuid4()
    reward_service.grant_once(db_session, material_id, 26)

    # Simulate the other request checking before the first insert landed
    racing = RewardService()
    monkeypatch.setattr(racing, "get_reward", lambda db, mid: None)

    assert racing.grant_once(db_session, material_id, 26) == 0
    assert db_session.query(Reward).count() == 1
    assert reward_service.get_total_rewards(db_session) == 26
