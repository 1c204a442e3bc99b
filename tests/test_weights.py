"""Tests for the weight table and bucket functions."""

import pytest

from loadcal.core.weights import (
    DEFAULT_WEIGHTS,
    EMOTIONAL_LOAD,
    GAP_DAMPENER,
    MEETING_TYPE,
    SOCIAL_LOAD,
    Bucket,
    EmotionalIntensity,
    MeetingType,
    Role,
    TimeOfDay,
    TopicChange,
    WeightTable,
    gap_dampener_for,
    social_load_for,
    time_of_day_for,
)


class TestLookup:
    def test_known_label(self):
        assert DEFAULT_WEIGHTS.lookup(MEETING_TYPE, "design_review", 0.3) == 0.8

    def test_enum_label(self):
        assert DEFAULT_WEIGHTS.lookup(MEETING_TYPE, MeetingType.DECISION, 0.3) == 0.9

    def test_unknown_label_uses_default(self):
        assert DEFAULT_WEIGHTS.lookup(MEETING_TYPE, "hackathon", 0.3) == 0.3

    def test_unknown_category_uses_default(self):
        assert DEFAULT_WEIGHTS.lookup("nonsense", "standup", 0.42) == 0.42

    def test_none_label_uses_default(self):
        assert DEFAULT_WEIGHTS.lookup(EMOTIONAL_LOAD, None, 0.4) == 0.4

    def test_labels_are_case_sensitive(self):
        assert DEFAULT_WEIGHTS.lookup(MEETING_TYPE, "Standup", 0.3) == 0.3


class TestDefaults:
    def test_complexity_fallback(self):
        assert DEFAULT_WEIGHTS.complexity("unknown") == 0.3

    def test_scalar_fallback(self):
        assert DEFAULT_WEIGHTS.scalar("unknown") == 1.0

    def test_role_fallback(self):
        assert DEFAULT_WEIGHTS.role("observer") == 0.5

    def test_emotional_fallback(self):
        assert DEFAULT_WEIGHTS.emotional("ecstatic") == 0.4

    def test_low_stakes_scalars(self):
        assert DEFAULT_WEIGHTS.scalar("sync") == 0.3
        assert DEFAULT_WEIGHTS.scalar("social") == 0.12
        assert DEFAULT_WEIGHTS.scalar("planning") == 1.0

    def test_every_enum_member_has_a_weight(self):
        table = DEFAULT_WEIGHTS.to_dict()
        assert set(table["meeting_type"]) == {m.value for m in MeetingType}
        assert set(table["role_load"]) == {r.value for r in Role}
        assert set(table["emotional_load"]) == {e.value for e in EmotionalIntensity}
        assert set(table["topic_change_cost"]) == {t.value for t in TopicChange}
        assert set(table["time_of_day_multiplier"]) == {t.value for t in TimeOfDay}

    def test_weights_in_unit_range(self):
        table = DEFAULT_WEIGHTS.to_dict()
        for category, weights in table.items():
            if category == "time_of_day_multiplier":
                continue
            assert all(0 <= w <= 1 for w in weights.values()), category

    def test_topic_costs(self):
        assert DEFAULT_WEIGHTS.topic_cost(TopicChange.RELATED_DOMAIN) == 0.3
        assert DEFAULT_WEIGHTS.topic_cost(TopicChange.UNRELATED) == 1.0


class TestWeightTable:
    def test_is_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_WEIGHTS.meeting_type["standup"] = 0.9

    def test_to_dict_is_a_copy(self):
        table = DEFAULT_WEIGHTS.to_dict()
        table["meeting_type"]["standup"] = 0.9
        assert DEFAULT_WEIGHTS.complexity("standup") == 0.2

    def test_bucket_labels_exposed(self):
        table = DEFAULT_WEIGHTS.to_dict()
        assert table[SOCIAL_LOAD] == {"1-2": 0.2, "3-5": 0.4, "6-10": 0.6, "11-20": 0.8, "20+": 1.0}
        assert table[GAP_DAMPENER] == {"0-5": 1.0, "5-15": 0.8, "15-30": 0.5, "30+": 0.2}

    def test_rejects_closed_bucket_table(self):
        with pytest.raises(ValueError):
            WeightTable(
                meeting_type={},
                meeting_type_scalar={},
                role_load={},
                emotional_load={},
                topic_change_cost={},
                time_of_day_multiplier={},
                gap_dampener=(Bucket("0-5", 5, 1.0),),
            )


class TestSocialLoad:
    @pytest.mark.parametrize(
        "attendees,expected",
        [(0, 0.2), (1, 0.2), (2, 0.2), (3, 0.4), (5, 0.4), (6, 0.6), (10, 0.6), (11, 0.8), (20, 0.8), (21, 1.0), (500, 1.0)],
    )
    def test_buckets(self, attendees, expected):
        assert social_load_for(attendees) == expected


class TestGapDampener:
    @pytest.mark.parametrize(
        "minutes,expected",
        [(0, 1.0), (5, 1.0), (5.5, 0.8), (15, 0.8), (16, 0.5), (30, 0.5), (30.01, 0.2), (45, 0.2), (600, 0.2)],
    )
    def test_buckets(self, minutes, expected):
        assert gap_dampener_for(minutes) == expected


class TestTimeOfDay:
    @pytest.mark.parametrize(
        "hour,expected",
        [
            (0, TimeOfDay.MORNING),
            (11, TimeOfDay.MORNING),
            (12, TimeOfDay.MIDDAY),
            (14, TimeOfDay.MIDDAY),
            (15, TimeOfDay.AFTERNOON),
            (17, TimeOfDay.AFTERNOON),
            (18, TimeOfDay.EVENING),
            (23, TimeOfDay.EVENING),
        ],
    )
    def test_buckets(self, hour, expected):
        assert time_of_day_for(hour) == expected

    def test_multipliers(self):
        assert DEFAULT_WEIGHTS.time_of_day(TimeOfDay.MORNING) == 1.0
        assert DEFAULT_WEIGHTS.time_of_day(TimeOfDay.MIDDAY) == 1.1
        assert DEFAULT_WEIGHTS.time_of_day(TimeOfDay.AFTERNOON) == 1.2
        assert DEFAULT_WEIGHTS.time_of_day(TimeOfDay.EVENING) == 1.4
