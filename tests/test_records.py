"""
Brief: Tests for srvwatch.records value types.

Inputs:
  - None

Outputs:
  - None
"""

import pytest

from srvwatch.records import ChangeNotification, LookupResult, RecordSet, is_initial


def test_lookup_result_equality_is_structural():
    """
    Brief: Two LookupResults with equal fields are equal and hash alike.

    Inputs:
      - identical host/port/priority/weight/ttl

    Outputs:
      - None: Asserts equality and set collapse
    """
    a = LookupResult("a.example.", 80, 1, 10, 300)
    b = LookupResult("a.example.", 80, 1, 10, 300)
    assert a == b
    assert len({a, b}) == 1
    assert str(a) == "a.example.:80"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"host": "", "port": 80},
        {"host": "h", "port": 70000},
        {"host": "h", "port": 80, "priority": -1},
        {"host": "h", "port": 80, "weight": 65536},
        {"host": "h", "port": 80, "ttl": -5},
    ],
)
def test_lookup_result_rejects_out_of_range_fields(kwargs):
    """
    Brief: Invalid host or out-of-range numeric fields raise ValueError.

    Inputs:
      - kwargs: one invalid field per case

    Outputs:
      - None: Asserts ValueError
    """
    with pytest.raises(ValueError):
        LookupResult(**kwargs)


def test_initial_marker_differs_from_known_empty():
    """
    Brief: The Initial marker is never equal to a known-empty set.

    Inputs:
      - None

    Outputs:
      - None: Asserts inequality and is_initial flags
    """
    initial = RecordSet.initial_marker()
    empty = RecordSet.empty()
    assert initial != empty
    assert is_initial(initial)
    assert not is_initial(empty)
    assert len(initial) == 0 and len(empty) == 0


def test_record_set_from_data_is_never_initial():
    """
    Brief: RecordSet.of() of any data, including no data, is known.

    Inputs:
      - empty and non-empty iterables

    Outputs:
      - None: Asserts known sets compare by content
    """
    assert not RecordSet.of([]).is_initial
    assert RecordSet.of([]) == RecordSet.empty()
    assert RecordSet.of(["a", "b", "a"]) == RecordSet.of(["b", "a"])
    assert "a" in RecordSet.of(["a"])


def test_union_ignores_initial_operands():
    """
    Brief: Union of known sets with the Initial marker only holds known records.

    Inputs:
      - two known sets and the Initial marker

    Outputs:
      - None: Asserts union content and known tag
    """
    merged = RecordSet.empty().union(
        RecordSet.of(["a"]), RecordSet.initial_marker(), RecordSet.of(["b", "a"])
    )
    assert merged == RecordSet.of(["a", "b"])
    assert not merged.is_initial


def test_change_notification_added_and_removed():
    """
    Brief: added/removed report the set difference between states.

    Inputs:
      - previous {a, b}, current {b, c}

    Outputs:
      - None: Asserts computed differences
    """
    n = ChangeNotification(RecordSet.of(["b", "c"]), RecordSet.of(["a", "b"]))
    assert n.added == frozenset({"c"})
    assert n.removed == frozenset({"a"})
