import pytest

from app.models import Material, MaterialType
from app.services.estimator_service import estimator_service
from tests.helpers import words


def test_video_duration_boundaries() -> None:
    assert estimator_service.estimate_duration(words(150), MaterialType.VIDEO) == 1
    assert estimator_service.estimate_duration(words(151), MaterialType.VIDEO) == 2


def test_document_reads_faster_than_video() -> None:
    assert estimator_service.estimate_duration(words(200), MaterialType.DOCUMENT) == 1
    assert estimator_service.estimate_duration(words(201), MaterialType.DOCUMENT) == 2
    assert estimator_service.estimate_duration(words(2000), MaterialType.VIDEO) == 14
    assert estimator_service.estimate_duration(words(2000), MaterialType.DOCUMENT) == 10


def test_duration_accepts_plain_type_strings() -> None:
    assert estimator_service.estimate_duration(words(300), "video") == 2
    assert estimator_service.estimate_duration(words(300), "document") == 2


def test_empty_text_is_zero_and_short_text_is_one_minute() -> None:
    assert estimator_service.estimate_duration("", MaterialType.VIDEO) == 0
    assert estimator_service.estimate_duration("   \n\t ", MaterialType.DOCUMENT) == 0
    assert estimator_service.estimate_duration("one", MaterialType.DOCUMENT) == 1


def test_words_split_on_any_whitespace_run() -> None:
    assert estimator_service.count_words("  alpha\n\nbeta\t gamma  ") == 3


def test_reward_floors_between_nine_and_eleven_minutes() -> None:
    assert estimator_service.calculate_reward(10) == 18
    assert estimator_service.calculate_reward(9) == 16
    assert estimator_service.calculate_reward(11) == 20


@pytest.mark.parametrize(
    ("duration", "expected"),
    [(1, 2), (5, 10), (8, 15), (12, 22), (14, 26), (20, 35)],
)
def test_reward_rounds_half_up_outside_floor_range(duration: int, expected: int) -> None:
    assert estimator_service.calculate_reward(duration) == expected


def test_reward_never_below_one_minute() -> None:
    assert estimator_service.calculate_reward(0) == 1
    assert estimator_service.calculate_reward(160) == 1
    assert estimator_service.calculate_reward(500) == 1


def test_fixed_reward_overrides_computed_value() -> None:
    material = Material(type=MaterialType.VIDEO, content_text=words(2000), reward_minutes=45)
    assert estimator_service.reward_for_material(material) == 45

    material.reward_minutes = None
    assert estimator_service.reward_for_material(material) == 26

    material.reward_minutes = 0
    assert estimator_service.reward_for_material(material) == 26
