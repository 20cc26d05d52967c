from pydantic_models.data.entry_model import EntryModel
from timecards.modules.column_assigner import assign_columns

from conftest import entry


def entries(*raw):
    return [EntryModel.model_validate(r) for r in raw]


def test_first_appearance_order_without_sorting():
    result = assign_columns(entries(entry("30", 1), entry("10", 1), entry("30", 1), entry("20", 1)), overtime=False)
    assert result.composites == ["30", "10", "20"]
    assert result.dropped == []


def test_night_key_gets_its_own_column():
    result = assign_columns(entries(entry("1", 1), entry("1", 1, night=True)), overtime=False)
    assert result.composites == ["1", "N1"]
    assert result.keys[1].job_code == "1"
    assert result.keys[1].night_shift is True


def test_blocks_are_assigned_independently():
    raw = entries(entry("A", 1), entry("B", 1, overtime=True), entry("C", 1), entry("A", 1, overtime=True))
    assert assign_columns(raw, overtime=False).composites == ["A", "C"]
    assert assign_columns(raw, overtime=True).composites == ["B", "A"]


def test_truncated_after_sixteen_slots():
    raw = entries(*[entry(str(100 + i), 1) for i in range(17)])
    result = assign_columns(raw, overtime=False)
    assert len(result.keys) == 16
    assert result.composites[-1] == "115"
    assert [k.composite for k in result.dropped] == ["116"]


def test_stable_for_identical_input():
    raw = entries(*[entry(str(i % 5), 1, night=bool(i % 2)) for i in range(20)])
    assert assign_columns(raw, overtime=False) == assign_columns(raw, overtime=False)
