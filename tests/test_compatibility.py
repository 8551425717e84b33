"""Tests for unsupported_features evaluation."""

import pytest

from ecmacompat.kernel.compatibility import (
    Feature,
    SparseCompatDataError,
    Target,
    explain_feature,
    unsupported_features,
    validate_feature,
)
from ecmacompat.kernel.families import DEFAULT_FAMILY_ALIASES, FamilyAliases
from ecmacompat.kernel.support import VersionAddedKind


def _feature(support, description=None, name=None):
    return Feature(
        name=name,
        description=description,
        compat_features=[{"__compat": {"support": support}}],
    )


def test_supports_feature_in_version_introduced():
    feature = _feature({"chrome": {"version_added": "73"}})

    unsupported = unsupported_features([feature], [Target(name="chrome", version="73")])
    assert unsupported == []


def test_supports_feature_in_later_version_comparing_numerically():
    """'14.0' is later than '9' even though it sorts earlier as a string."""
    feature = _feature({"safari": {"version_added": "9"}})

    unsupported = unsupported_features([feature], [Target(name="safari", version="14.0")])
    assert unsupported == []


def test_doesnt_support_feature_in_version_before_introduced():
    feature = _feature({"chrome": {"version_added": "73"}})

    unsupported = unsupported_features([feature], [Target(name="chrome", version="72")])
    assert unsupported[0] is feature


def test_supports_feature_supported_in_unknown_version():
    feature = _feature({"chrome": {"version_added": True}})

    unsupported = unsupported_features([feature], [Target(name="chrome", version="73")])
    assert unsupported == []


def test_doesnt_support_feature_never_supported_by_family():
    feature = _feature({"chrome": {"version_added": False}})

    unsupported = unsupported_features([feature], [Target(name="chrome", version="73")])
    assert unsupported[0] is feature


def test_supports_feature_with_unknown_support():
    feature = _feature({"chrome": {"version_added": None}})

    unsupported = unsupported_features([feature], [Target(name="chrome", version="73")])
    assert unsupported == []


def test_supports_feature_with_omitted_entry_for_mobile_target():
    feature = _feature({"chrome": {"version_added": "73"}})

    unsupported = unsupported_features([feature], [Target(name="chrome_android", version="73")])
    assert unsupported == []


def test_mobile_fallback_follows_alias_chain():
    """samsunginternet_android -> chrome_android -> chrome."""
    feature = _feature({"chrome": {"version_added": "80"}})

    unsupported = unsupported_features(
        [feature], [Target(name="samsunginternet_android", version="9.2")]
    )
    assert unsupported == []


def test_explicit_mobile_entry_is_evaluated():
    feature = _feature({
        "safari": {"version_added": "13.1"},
        "safari_ios": {"version_added": "13.4"},
    })

    unsupported = unsupported_features([feature], [Target(name="safari_ios", version="13.2")])
    assert unsupported == [feature]


def test_doesnt_support_feature_supported_by_one_target_but_not_another():
    feature = _feature({
        "chrome": {"version_added": "60"},
        "firefox": {"version_added": "55"},
    })

    unsupported = unsupported_features(
        [feature],
        [Target(name="chrome", version="73"), Target(name="firefox", version="50")],
    )
    assert unsupported[0] is feature


def test_uses_primary_support_record_where_multiple_exist():
    feature = _feature({
        "nodejs": [
            {"version_added": "7.0.0"},
            {
                "version_added": "6.5.0",
                "flags": [{"type": "runtime_flag", "name": "--harmony"}],
            },
        ],
    })

    primary_unsupported = unsupported_features([feature], [Target(name="nodejs", version="7.0.0")])
    assert primary_unsupported == []

    secondary_unsupported = unsupported_features([feature], [Target(name="nodejs", version="6.7.0")])
    assert secondary_unsupported[0] is feature


def test_feature_with_multiple_records_fails_if_any_record_fails():
    feature = Feature(
        name="no-array-prototype-flat",
        compat_features=[
            {"__compat": {"support": {"chrome": {"version_added": "69"}}}},
            {"__compat": {"support": {"chrome": {"version_added": "75"}}}},
        ],
    )

    assert unsupported_features([feature], [Target(name="chrome", version="73")]) == [feature]
    assert unsupported_features([feature], [Target(name="chrome", version="75")]) == []


def test_preserves_input_order_without_duplicates():
    first = _feature({"chrome": {"version_added": "80"}}, name="first")
    supported = _feature({"chrome": {"version_added": "50"}}, name="supported")
    last = _feature({"chrome": {"version_added": False}}, name="last")
    targets = [Target(name="chrome", version="73"), Target(name="chrome", version="74")]

    unsupported = unsupported_features([first, supported, last], targets)
    assert [f.name for f in unsupported] == ["first", "last"]
    assert unsupported[0] is first
    assert unsupported[1] is last


def test_repeated_calls_give_equal_results():
    features = [
        _feature({"chrome": {"version_added": "80"}}, name="a"),
        _feature({"chrome": {"version_added": "50"}}, name="b"),
    ]
    targets = [Target(name="chrome", version="73")]

    assert unsupported_features(features, targets) == unsupported_features(features, targets)


def test_empty_targets_flags_nothing():
    feature = _feature({"chrome": {"version_added": False}})
    assert unsupported_features([feature], []) == []


def test_explains_what_the_problem_is_when_compat_feature_not_found():
    feature = Feature(
        description="some rule",
        compat_features=[
            # Unsupported record first, so validation must not short-circuit
            {"__compat": {"support": {"chrome": {"version_added": "72"}}}},
            # Typically a wrong path into compat data
            None,
        ],
    )

    with pytest.raises(SparseCompatDataError) as excinfo:
        unsupported_features([feature], [Target(name="chrome", version="73")])
    assert str(excinfo.value) == "Sparse compat_features for rule 'some rule': object,undefined"
    assert excinfo.value.feature is feature
    assert excinfo.value.rendering == "object,undefined"


def test_sparse_feature_raises_even_after_earlier_unsupported_feature():
    unsupported = _feature({"chrome": {"version_added": False}}, name="unsupported")
    sparse = Feature(name="sparse-rule", compat_features=[None])

    with pytest.raises(SparseCompatDataError, match="Sparse compat_features for rule 'sparse-rule': undefined"):
        unsupported_features([unsupported, sparse], [Target(name="chrome", version="73")])


def test_sparse_label_falls_back_to_name():
    feature = Feature(name="no-optional-chaining", compat_features=[None])

    with pytest.raises(SparseCompatDataError) as excinfo:
        validate_feature(feature)
    assert excinfo.value.label == "no-optional-chaining"


def test_malformed_record_is_sparse():
    feature = Feature(
        description="bad node",
        compat_features=[{"description": "a parent node without __compat"}],
    )

    with pytest.raises(SparseCompatDataError, match="record 0 is malformed"):
        unsupported_features([feature], [Target(name="chrome", version="73")])


def test_ranged_primary_version_on_queried_family_is_sparse():
    feature = _feature({"chrome": {"version_added": "≤37"}}, description="ranged")

    with pytest.raises(SparseCompatDataError, match="non-numeric version_added '≤37' for 'chrome'"):
        unsupported_features([feature], [Target(name="chrome", version="73")])


def test_non_numeric_flagged_secondary_entry_is_ignored():
    feature = _feature({
        "safari": [
            {"version_added": "14"},
            {"version_added": "preview", "flags": [{"type": "preference", "name": "Experimental"}]},
        ],
    })

    assert unsupported_features([feature], [Target(name="safari", version="15")]) == []
    assert unsupported_features([feature], [Target(name="safari", version="13")]) == [feature]


def test_ranged_version_on_unqueried_family_is_ignored():
    feature = _feature({
        "chrome": {"version_added": "60"},
        "edge": {"version_added": "≤18"},
    })

    assert unsupported_features([feature], [Target(name="chrome", version="73")]) == []

    with pytest.raises(SparseCompatDataError, match="'edge'"):
        unsupported_features([feature], [Target(name="edge", version="79")])


def test_missing_entry_for_non_variant_family_is_sparse():
    feature = _feature({"chrome": {"version_added": "60"}}, description="chrome only")

    with pytest.raises(SparseCompatDataError, match="no support entry for 'firefox'"):
        unsupported_features([feature], [Target(name="firefox", version="70")])


def test_missing_variant_entry_without_base_entry_is_supported():
    """A variant family lacking its own entry never counts as sparse or unsupported."""
    feature = _feature({"firefox": {"version_added": "60"}}, description="firefox only")

    assert unsupported_features([feature], [Target(name="chrome_android", version="80")]) == []
    assert unsupported_features([feature], [Target(name="webview_android", version="80")]) == []


def test_custom_alias_table():
    feature = _feature({"chrome": {"version_added": "80"}})
    aliases = DEFAULT_FAMILY_ALIASES.extended({"edge_mobile": "chrome"})

    unsupported = unsupported_features([feature], [Target(name="edge_mobile", version="45")], aliases)
    assert unsupported == []

    with pytest.raises(SparseCompatDataError):
        unsupported_features([feature], [Target(name="edge_mobile", version="45")], FamilyAliases())


def test_explain_feature_lists_all_failures():
    feature = _feature({
        "chrome": {"version_added": "80"},
        "firefox": {"version_added": False},
        "nodejs": {"version_added": "12.0.0"},
    })
    targets = [
        Target(name="chrome", version="73"),
        Target(name="firefox", version="90"),
        Target(name="nodejs", version="14.0.0"),
    ]

    failures = explain_feature(feature, targets)
    assert [(f.target.name, f.kind) for f in failures] == [
        ("chrome", VersionAddedKind.VERSION),
        ("firefox", VersionAddedKind.NEVER),
    ]
    assert failures[0].version_added == "80"
    assert failures[1].version_added is False
