import itertools

import pytest

from channel_mapping import (
    MATCH_ALIAS,
    MATCH_EXACT,
    ChannelIndex,
    channel_label,
    channel_label_for_tags,
    channel_matches,
    resolve_channel_matches,
    resolve_primary_channel,
)
from channels_catalog import channels_catalog
from conftest import make_entry


def test_empty_tags_resolve_to_general():
    assert resolve_primary_channel([]) == "general"
    assert resolve_primary_channel(None) == "general"


def test_unknown_tags_resolve_to_general():
    assert resolve_primary_channel(["unknown-tag"]) == "general"


def test_tags_that_normalize_to_nothing_resolve_to_general():
    assert resolve_primary_channel(["", "!!!", "   "]) == "general"


def test_exact_tag_slug_match():
    assert resolve_primary_channel(["nutrition-meal-planning"]) == "nutrition-meal-planning"


def test_alias_match():
    assert resolve_primary_channel(["shake"]) == "nutrition-meal-planning"


def test_exact_match_beats_alias_match():
    # shake is an alias of nutrition (priority 20); sleep-recovery is exact (priority 30)
    assert resolve_primary_channel(["shake", "sleep-recovery"]) == "sleep-recovery"


def test_lower_priority_wins_among_aliases():
    # sleep -> sleep-recovery (30), focus -> productivity-systems (80)
    assert resolve_primary_channel(["focus", "sleep"]) == "sleep-recovery"


def test_tie_breaks_on_lexical_slug(tie_catalog):
    assert resolve_primary_channel(["shared-alias"], tie_catalog) == "a-channel"
    assert resolve_primary_channel(["shared-alias"], list(reversed(tie_catalog))) == "a-channel"


def test_priority_beats_lexical_slug():
    catalog = [
        make_entry("general", priority=999),
        make_entry("a-channel", aliases=["shared"], priority=10),
        make_entry("z-channel", aliases=["shared"], priority=5),
    ]
    assert resolve_primary_channel(["shared"], catalog) == "z-channel"


def test_general_is_never_matched_by_tags():
    assert resolve_primary_channel(["misc"]) == "general"
    catalog = [
        make_entry("general", aliases=["focus"], priority=0),
        make_entry("productivity", aliases=["focus"], priority=50),
    ]
    assert resolve_primary_channel(["focus"], catalog) == "productivity"


def test_inputs_are_renormalized():
    assert resolve_primary_channel(["  #Sleep Recovery "]) == "sleep-recovery"
    assert resolve_primary_channel(["SHAKE!"]) == "nutrition-meal-planning"


def test_fallback_without_general_in_catalog():
    catalog = [make_entry("focus")]
    assert resolve_primary_channel(["nothing"], catalog) == "general"
    assert resolve_primary_channel(["focus"], catalog) == "focus"


def test_result_does_not_depend_on_tag_order():
    tags = ["shake", "travel", "sleep-recovery", "coding"]
    results = {resolve_primary_channel(list(order)) for order in itertools.permutations(tags)}
    assert results == {"sleep-recovery"}


def test_result_does_not_depend_on_catalog_order():
    catalog = list(channels_catalog())
    tags = ["protein", "sleep", "workout"]
    expected = resolve_primary_channel(tags, catalog)
    assert expected == "fitness-training"
    assert resolve_primary_channel(tags, list(reversed(catalog))) == expected


def test_catalog_is_not_mutated(tie_catalog):
    before = list(tie_catalog)
    resolve_primary_channel(["shared-alias", "a-channel"], tie_catalog)
    assert tie_catalog == before


def test_channel_matches_lists_every_candidate_best_first():
    matches = channel_matches(["protein", "shake", "sleep"])
    assert [(m.slug, m.kind) for m in matches] == [
        ("nutrition-meal-planning", MATCH_ALIAS),
        ("nutrition-meal-planning", MATCH_ALIAS),
        ("sleep-recovery", MATCH_ALIAS),
    ]
    assert {m.tag for m in matches[:2]} == {"protein", "shake"}


def test_channel_matches_exact_first():
    matches = channel_matches(["shake", "travel-planning"])
    assert matches[0].slug == "travel-planning"
    assert matches[0].kind == MATCH_EXACT
    assert matches[1].kind == MATCH_ALIAS


@pytest.mark.parametrize(
    "tags",
    [
        [],
        ["shake"],
        ["unknown-tag"],
        ["shake", "sleep-recovery"],
        ["#Travel", "git"],
        ["misc", "other"],
    ],
)
def test_channel_label_for_tags(tags):
    assert channel_label_for_tags(tags) == "b/" + resolve_primary_channel(tags)


def test_channel_label_for_alias():
    assert channel_label_for_tags(["shake"]) == "b/nutrition-meal-planning"


@pytest.mark.parametrize(
    "tags",
    [
        [],
        ["!!!"],
        ["shake"],
        ["unknown-tag"],
        ["shake", "sleep-recovery"],
        ["general", "misc"],
    ],
)
def test_resolve_channel_matches_pairs_winner_with_candidates(tags):
    channel, matches = resolve_channel_matches(tags)
    assert channel == resolve_primary_channel(tags)
    assert matches == channel_matches(tags)
    if matches:
        assert matches[0].slug == channel


def test_channel_label():
    assert channel_label("general") == "b/general"
    assert channel_label_for_tags(["sleep"]) == channel_label(resolve_primary_channel(["sleep"]))


@pytest.mark.parametrize(
    "tags",
    [
        [],
        ["shake"],
        ["unknown-tag"],
        ["shake", "sleep-recovery"],
        ["focus", "sleep", "coding", "llm"],
        ["general", "misc"],
        ["  #Meal Prep "],
    ],
)
def test_index_agrees_with_linear_scan(tags):
    index = ChannelIndex()
    assert index.resolve(tags) == resolve_primary_channel(tags)
    assert index.matches(tags) == channel_matches(tags)


def test_index_tie_break(tie_catalog):
    assert ChannelIndex(tie_catalog).resolve(["shared-alias"]) == "a-channel"
    assert ChannelIndex([make_entry("focus")]).resolve([]) == "general"
