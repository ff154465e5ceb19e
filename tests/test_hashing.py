"""Tests for the H symbol and its random sources."""

import pytest

from cronbits import (
    CronFieldType,
    HashContext,
    HashedScheduleError,
    HashListError,
    InvalidRangeError,
    RandomSource,
    ScriptedSource,
    SeededSource,
    parse,
    parse_with_hash,
)
from cronbits.parser import NAMED_HASHED_SCHEDULES
from conftest import make_schedule


# =============================================================================
# Random Source Tests
# =============================================================================


class TestScriptedSource:
    """Tests for the replaying test source."""

    def test_cycles_through_values(self):
        """Test values repeat once exhausted."""
        source = ScriptedSource([1, 2])
        assert [source.intn(10) for _ in range(5)] == [1, 2, 1, 2, 1]

    def test_reduces_modulo_bound(self):
        """Test values are kept below the requested bound."""
        assert ScriptedSource([25]).intn(7) == 4

    def test_records_bounds(self):
        """Test requested bounds are recorded."""
        source = ScriptedSource([0])
        source.intn(3)
        source.intn(9)
        assert source.calls == [3, 9]

    def test_rejects_bad_input(self):
        """Test empty or negative scripts and non-positive bounds."""
        with pytest.raises(ValueError):
            ScriptedSource([])
        with pytest.raises(ValueError):
            ScriptedSource([1, -1])
        with pytest.raises(ValueError):
            ScriptedSource([1]).intn(0)

    def test_satisfies_protocol(self):
        """Test both sources are RandomSources."""
        assert isinstance(ScriptedSource([1]), RandomSource)
        assert isinstance(SeededSource(1), RandomSource)


class TestSeededSource:
    """Tests for the seeded pseudorandom source."""

    def test_same_seed_same_sequence(self):
        """Test reproducibility for int and str seeds."""
        for seed in (1, 2**63, "backup-job", b"raw"):
            a = SeededSource(seed)
            b = SeededSource(seed)
            assert [a.intn(60) for _ in range(20)] == [b.intn(60) for _ in range(20)]

    def test_values_within_bound(self):
        """Test draws stay in [0, n)."""
        source = SeededSource(7)
        assert all(0 <= source.intn(7) < 7 for _ in range(200))

    def test_rejects_non_positive_bound(self):
        """Test intn(0) is an error."""
        with pytest.raises(ValueError):
            SeededSource(1).intn(0)


# =============================================================================
# Hash Context Tests
# =============================================================================


class TestHashContext:
    """Tests for per-parse random state."""

    def test_draws_one_value_per_field_in_order(self):
        """Test up-front draws use each field's random domain."""
        source = ScriptedSource([100])
        HashContext(source)
        assert source.calls == [60, 24, 28, 12, 7]

    def test_field_values_are_storage_positions(self):
        """Test field values come straight from the source."""
        context = HashContext(ScriptedSource([5, 6, 7, 8, 3]))
        assert context.field_value(CronFieldType.MINUTE) == 5
        assert context.field_value(CronFieldType.DAY_OF_MONTH) == 7
        assert context.used

    def test_step_offset_bound(self):
        """Test the offset bound is min(step, random domain)."""
        source = ScriptedSource([0])
        context = HashContext(source)
        context.step_offset(CronFieldType.HOUR, 6)
        context.step_offset(CronFieldType.DAY_OF_WEEK, 10)
        assert source.calls[5:] == [6, 7]

    def test_step_offset_bound_day_of_month(self):
        """Test day-of-month offsets are bounded by 28, not 31."""
        source = ScriptedSource([0])
        context = HashContext(source)
        context.step_offset(CronFieldType.DAY_OF_MONTH, 30)
        context.step_offset(CronFieldType.DAY_OF_MONTH, 10)
        assert source.calls[5:] == [28, 10]

    def test_out_of_range_field_draw(self):
        """Test a source returning values outside [0, n) is refused."""

        class Broken:
            def intn(self, n):
                return n

        with pytest.raises(ValueError):
            HashContext(Broken())

    def test_out_of_range_step_draw(self):
        """Test step offsets from a broken source are refused."""

        class LateBreak:
            def __init__(self):
                self.count = 0

            def intn(self, n):
                self.count += 1
                return 0 if self.count <= 5 else -1

        context = HashContext(LateBreak())
        with pytest.raises(ValueError):
            context.step_offset(CronFieldType.MINUTE, 15)

    def test_disabled_context(self):
        """Test the null context is not enabled and starts unused."""
        context = HashContext.disabled()
        assert not context.enabled
        assert not context.used


# =============================================================================
# ParseWithHash Tests
# =============================================================================


class TestParseWithHash:
    """Tests for expressions using H."""

    def test_bare_h_sets_drawn_bit(self):
        """Test a bare H selects exactly the drawn position."""
        s = parse_with_hash("H * * * *", source=ScriptedSource([41]))
        assert s == make_schedule([41], None, None, None, None)

    def test_every_field_hashed(self):
        """Test each field takes its own draw."""
        s = parse_with_hash("H H H H H", source=ScriptedSource([5, 6, 7, 8, 3]))
        assert s.values(CronFieldType.MINUTE) == (5,)
        assert s.values(CronFieldType.HOUR) == (6,)
        assert s.values(CronFieldType.DAY_OF_MONTH) == (8,)
        assert s.values(CronFieldType.MONTH) == (9,)
        assert s.values(CronFieldType.DAY_OF_WEEK) == (3,)

    def test_day_of_month_limited_to_28(self):
        """Test random days stay within 1-28."""
        last = parse_with_hash("* * H * *", source=ScriptedSource([0, 0, 27, 0, 0]))
        assert last.values(CronFieldType.DAY_OF_MONTH) == (28,)
        wrapped = parse_with_hash("* * H * *", source=ScriptedSource([0, 0, 28, 0, 0]))
        assert wrapped.values(CronFieldType.DAY_OF_MONTH) == (1,)

    def test_day_of_month_seeded_range(self):
        """Test seeded days never exceed 28."""
        days = {
            parse_with_hash("0 0 H * *", seed).values(CronFieldType.DAY_OF_MONTH)[0]
            for seed in range(300)
        }
        assert min(days) >= 1
        assert max(days) <= 28

    def test_hashed_step(self):
        """Test H/n starts at a drawn offset."""
        source = ScriptedSource([0, 0, 0, 0, 0, 4])
        s = parse_with_hash("* H/6 * * *", source=source)
        assert s == make_schedule(None, [4, 10, 16, 22], None, None, None)
        assert source.calls[-1] == 6

    def test_hashed_step_minutes(self):
        """Test H/15 on minutes."""
        s = parse_with_hash("H/15 * * * *", source=ScriptedSource([0, 0, 0, 0, 0, 4]))
        assert s.values(CronFieldType.MINUTE) == (4, 19, 34, 49)

    def test_hashed_step_larger_than_field(self):
        """Test the offset is drawn below the field's random domain."""
        source = ScriptedSource([0, 0, 0, 0, 0, 9])
        s = parse_with_hash("* * * * H/10", source=source)
        assert source.calls[-1] == 7
        assert s.values(CronFieldType.DAY_OF_WEEK) == (2,)

    def test_hashed_step_day_of_month(self):
        """Test H/n offsets are storage positions, not shifted again."""
        s = parse_with_hash("* * H/10 * *", source=ScriptedSource([0, 0, 0, 0, 0, 3]))
        assert s.values(CronFieldType.DAY_OF_MONTH) == (4, 14, 24)

    @pytest.mark.parametrize("step", [29, 30, 31])
    def test_hashed_step_day_of_month_beyond_28(self, step):
        """Test long H/n steps on days still start within 1-28."""
        source = ScriptedSource([0, 0, 0, 0, 0, step - 1])
        s = parse_with_hash(f"0 0 H/{step} * *", source=source)
        assert source.calls[-1] == 28
        assert s.values(CronFieldType.DAY_OF_MONTH)[0] == (step - 1) % 28 + 1

    def test_hashed_step_day_of_month_seeded_range(self):
        """Test seeded H/31 days never exceed 28."""
        days = {
            parse_with_hash("0 0 H/31 * *", seed).values(CronFieldType.DAY_OF_MONTH)[0]
            for seed in range(300)
        }
        assert max(days) <= 28

    def test_broken_source_in_parse(self):
        """Test parse_with_hash surfaces an out-of-range draw."""

        class TooLarge:
            def intn(self, n):
                return 60

        with pytest.raises(ValueError):
            parse_with_hash("H * * * *", source=TooLarge())

    def test_hashed_step_of_one(self):
        """Test H/1 covers the whole field."""
        assert parse_with_hash("H/1 * * * *", 1) == parse("* * * * *")

    def test_mixed_fields(self):
        """Test hashed and literal fields together."""
        s = parse_with_hash(
            "H H/12 * MARCH *", source=ScriptedSource([14, 0, 0, 0, 0, 4])
        )
        assert s == make_schedule([14], [4, 16], None, [2], None)

    def test_lowercase_h(self):
        """Test h is accepted like H."""
        s = parse_with_hash("h * * * *", source=ScriptedSource([7]))
        assert s.values(CronFieldType.MINUTE) == (7,)

    def test_same_seed_same_schedule(self):
        """Test two parses with one seed are identical."""
        for seed in (42, "nightly-report"):
            expr = "H H H * H/3"
            assert parse_with_hash(expr, seed) == parse_with_hash(expr, seed)

    def test_seeds_spread_values(self):
        """Test different seeds pick different minutes."""
        minutes = {parse_with_hash("H * * * *", seed).values(CronFieldType.MINUTE) for seed in range(50)}
        assert len(minutes) > 1

    def test_draws_independent_of_other_fields(self):
        """Test the minute drawn for H does not depend on the hour field."""
        for seed in range(20):
            a = parse_with_hash("H 0 * * *", seed)
            b = parse_with_hash("H H * * *", seed)
            assert a.values(CronFieldType.MINUTE) == b.values(CronFieldType.MINUTE)

    def test_h_with_comma_fails(self):
        """Test H cannot be mixed with comma alternatives."""
        for expr in ("* 1,H/4 * * *", "H,5 * * * *", "* * * * H,MON"):
            with pytest.raises(HashListError, match="H symbol used with ,"):
                parse_with_hash(expr, 1)

    def test_h_in_range_fails(self):
        """Test H as a range bound is rejected."""
        with pytest.raises(InvalidRangeError):
            parse_with_hash("H-5 * * * *", 1)

    def test_seed_or_source_required(self):
        """Test exactly one of seed and source must be given."""
        with pytest.raises(ValueError):
            parse_with_hash("H * * * *")
        with pytest.raises(ValueError):
            parse_with_hash("H * * * *", 1, source=ScriptedSource([1]))

    @pytest.mark.parametrize("expression", ["H * * * *", "* H/4 * * *", "H H * JAN-MAR H"])
    def test_parse_rejects_what_hash_mode_accepts(self, expression):
        """Test parse raises HashedScheduleError for valid hashed expressions."""
        with pytest.raises(HashedScheduleError):
            parse(expression)
        assert parse_with_hash(expression, 3).valid()

    def test_parse_reports_hash_before_comma_mix(self):
        """Test parse gives the hash error even when H is mixed with commas."""
        with pytest.raises(HashedScheduleError):
            parse("* 1,H/4 * * *")


# =============================================================================
# Hashed Alias Tests
# =============================================================================


class TestHashedAliases:
    """Tests for named schedules in hash mode."""

    @pytest.mark.parametrize("name,expansion", list(NAMED_HASHED_SCHEDULES.items()))
    def test_alias_equals_expansion(self, name, expansion):
        """Test each hashed alias equals its expansion for the same seed."""
        for seed in (1, 10, 100):
            assert parse_with_hash(name, seed) == parse_with_hash(expansion, seed)

    def test_monthly_with_script(self):
        """Test @monthly picks minute, hour and day from the script."""
        s = parse_with_hash("@monthly", source=ScriptedSource([1, 2, 3]))
        assert s == make_schedule([1], [2], [3], None, None)

    def test_weekly_with_script(self):
        """Test @weekly hashes the weekday."""
        s = parse_with_hash("@weekly", source=ScriptedSource([10, 20, 0, 0, 5]))
        assert s == make_schedule([10], [20], None, None, [5])
