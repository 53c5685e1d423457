"""Tests for ranges, pattern sub-languages, and canonical filter text."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from jj_analyze.filters import (
    DateFilter,
    DiffLinesFilter,
    ExtensionFilter,
    FileFilter,
    HasConflictFilter,
    ParentCountFilter,
    SignedFilter,
    StringFilter,
)
from jj_analyze.patterns import (
    DatePattern,
    FilePattern,
    FilesetAll,
    FilesetDifference,
    FilesetIntersection,
    FilesetNone,
    FilesetPattern,
    FilesetUnion,
    StringIntersection,
    StringNotIn,
    StringPattern,
    StringUnion,
    format_date_pattern,
    format_file_pattern,
    format_fileset_expression,
    format_string_expression,
    is_all_pattern,
)
from jj_analyze.ranges import (
    GENERATION_RANGE_FULL,
    PARENTS_RANGE_FULL,
    U32_MAX,
    U64_MAX,
    Interval,
    format_range,
)

# ── Ranges ───────────────────────────────────────────────────────────


class TestFormatRange:
    def test_full_range_has_no_text(self):
        assert format_range(GENERATION_RANGE_FULL, GENERATION_RANGE_FULL) is None

    def test_empty(self):
        assert format_range(Interval(3, 3), GENERATION_RANGE_FULL) == "empty range"

    def test_single_value(self):
        assert format_range(Interval(1, 2), GENERATION_RANGE_FULL) == "1"

    def test_open_ended(self):
        assert format_range(Interval(2, U64_MAX), GENERATION_RANGE_FULL) == "2.."

    def test_bounded(self):
        assert format_range(Interval(0, 3), GENERATION_RANGE_FULL) == "0..3"

    def test_open_end_depends_on_full_range(self):
        assert format_range(Interval(1, U32_MAX), PARENTS_RANGE_FULL) == "1.."
        assert format_range(Interval(1, U32_MAX), GENERATION_RANGE_FULL) == f"1..{U32_MAX}"


class TestInterval:
    def test_width(self):
        assert Interval(5, 15).width == 10

    def test_width_saturates(self):
        assert Interval(10, 3).width == 0

    @pytest.mark.parametrize(
        "interval, large",
        [
            (Interval(0, 9_999), False),
            (Interval(0, 10_000), True),
            (GENERATION_RANGE_FULL, True),
        ],
    )
    def test_is_large(self, interval, large):
        assert interval.is_large() is large


# ── String patterns ──────────────────────────────────────────────────


class TestStringExpressions:
    @pytest.mark.parametrize(
        "kind",
        ["exact", "exact-i", "substring", "substring-i", "glob", "glob-i", "regex", "regex-i"],
    )
    def test_pattern_kinds(self, kind):
        pattern = StringPattern(kind=kind, value="fix")
        assert format_string_expression(pattern) == f'{kind}:"fix"'

    def test_literal_is_quoted_and_escaped(self):
        pattern = StringPattern(kind="exact", value='say "hi"')
        assert format_string_expression(pattern) == 'exact:"say \\"hi\\""'

    def test_combinators(self):
        expr = StringUnion(
            left=StringPattern(kind="glob", value="main"),
            right=StringNotIn(operand=StringPattern(kind="exact", value="dev")),
        )
        assert format_string_expression(expr) == '(glob:"main" | ~exact:"dev")'

    def test_nested_intersection(self):
        expr = StringIntersection(
            left=StringPattern(value="a"),
            right=StringUnion(left=StringPattern(value="b"), right=StringPattern(value="c")),
        )
        assert (
            format_string_expression(expr)
            == '(substring:"a" & (substring:"b" | substring:"c"))'
        )

    def test_all_pattern(self):
        assert is_all_pattern(StringPattern(kind="substring", value=""))
        assert not is_all_pattern(StringPattern(kind="exact", value=""))
        assert not is_all_pattern(StringNotIn(operand=StringPattern(value="")))


# ── Date patterns ────────────────────────────────────────────────────


class TestDatePatterns:
    def test_after(self):
        pattern = DatePattern(kind="after", at=datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC))
        assert format_date_pattern(pattern) == "after:2024-01-02T03:04:05+00:00"

    def test_converted_to_utc(self):
        tz = timezone(timedelta(hours=2))
        pattern = DatePattern(kind="before", at=datetime(2024, 1, 2, 12, 0, tzinfo=tz))
        assert format_date_pattern(pattern) == "before:2024-01-02T10:00:00+00:00"

    def test_milliseconds_kept(self):
        at = datetime(2024, 1, 2, 0, 0, 0, 250_000, tzinfo=UTC)
        assert format_date_pattern(DatePattern(kind="after", at=at)) == (
            "after:2024-01-02T00:00:00.250+00:00"
        )

    def test_parsed_from_iso_string(self):
        pattern = DatePattern.model_validate({"kind": "after", "at": "2024-05-01T00:00:00Z"})
        assert format_date_pattern(pattern) == "after:2024-05-01T00:00:00+00:00"


# ── File patterns and filesets ───────────────────────────────────────


class TestFilePatterns:
    def test_file_path(self):
        assert format_file_pattern(FilePattern(kind="file", path="src/lib.rs")) == 'file:"src/lib.rs"'

    def test_prefix_path(self):
        assert format_file_pattern(FilePattern(kind="prefix", path="docs")) == '"docs"'

    def test_glob_with_dir(self):
        pattern = FilePattern(kind="glob", dir="src", path="*.rs")
        assert format_file_pattern(pattern) == 'glob:"src/*.rs"'

    def test_prefix_glob_at_root(self):
        pattern = FilePattern(kind="prefix-glob", path="*.md")
        assert format_file_pattern(pattern) == 'prefix-glob:"*.md"'


class TestFilesets:
    def test_constants(self):
        assert format_fileset_expression(FilesetNone()) == "none()"
        assert format_fileset_expression(FilesetAll()) == "all()"

    def test_union_of_many(self):
        expr = FilesetUnion(
            operands=(
                FilesetPattern(pattern=FilePattern(kind="prefix", path="a")),
                FilesetPattern(pattern=FilePattern(kind="prefix", path="b")),
                FilesetPattern(pattern=FilePattern(kind="prefix", path="c")),
            )
        )
        assert format_fileset_expression(expr) == '("a" | "b" | "c")'

    def test_intersection_and_difference(self):
        src = FilesetPattern(pattern=FilePattern(kind="prefix", path="src"))
        tests = FilesetPattern(pattern=FilePattern(kind="glob", path="*_test.py"))
        assert format_fileset_expression(FilesetIntersection(left=src, right=tests)) == (
            '("src" & glob:"*_test.py")'
        )
        assert format_fileset_expression(FilesetDifference(left=src, right=tests)) == (
            '("src" ~ glob:"*_test.py")'
        )


# ── Filters ──────────────────────────────────────────────────────────


class TestFilterText:
    def test_merges(self):
        assert ParentCountFilter(range=Interval(2, U32_MAX)).to_text() == "merges()"

    def test_parent_count(self):
        assert ParentCountFilter(range=Interval(0, 2)).to_text() == "parent_count(0..2)"
        assert ParentCountFilter(range=Interval(1, 2)).to_text() == "parent_count(1)"

    @pytest.mark.parametrize(
        "kind",
        [
            "description",
            "subject",
            "author_name",
            "author_email",
            "committer_name",
            "committer_email",
        ],
    )
    def test_string_filters(self, kind):
        text = StringFilter(kind=kind, pattern=StringPattern(kind="glob", value="*x*")).to_text()
        assert text == f'{kind}(glob:"*x*")'

    def test_date_filter(self):
        pattern = DatePattern(kind="after", at=datetime(2024, 1, 1, tzinfo=UTC))
        assert DateFilter(kind="committer_date", pattern=pattern).to_text() == (
            "committer_date(after:2024-01-01T00:00:00+00:00)"
        )

    def test_files(self):
        files = FilesetPattern(pattern=FilePattern(kind="file", path="Cargo.toml"))
        assert FileFilter(files=files).to_text() == 'files(file:"Cargo.toml")'

    def test_diff_lines(self):
        text = DiffLinesFilter(
            text=StringPattern(kind="regex", value="TODO"), files=FilesetAll()
        ).to_text()
        assert text == 'diff_lines(regex:"TODO", all())'

    def test_zero_argument_filters(self):
        assert HasConflictFilter().to_text() == "conflicts()"
        assert SignedFilter().to_text() == "signed()"

    def test_extension_prints_raw_tag(self):
        assert ExtensionFilter(tag="my_ext(42)").to_text() == "my_ext(42)"

    def test_filter_from_document(self):
        data = {"kind": "parent_count", "range": {"start": 2, "end": U32_MAX}}
        assert ParentCountFilter.model_validate(data).to_text() == "merges()"
