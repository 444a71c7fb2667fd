# tests/test_glossary.py
from devsecops_tutor.glossary import (
    CODE, TEXT, annotate, annotated_terms, render_markers, split_code_fences,
)

GLOSSARY = {"CI/CD": "Continuous integration and delivery", "CI": "Continuous integration"}


def mark(term, surface=None):
    return f'<glossary-term data-term="{term}">{surface or term}</glossary-term>'


def test_longer_phrase_wins_over_prefix():
    result = annotate("Use CI/CD and CI for automation.", GLOSSARY)
    assert result == f"Use {mark('CI/CD')} and {mark('CI')} for automation."


def test_longest_match_independent_of_glossary_order():
    reordered = {"CI": "x", "CI/CD": "y"}
    assert annotate("CI/CD", reordered) == mark("CI/CD")


def test_shorter_term_not_rematched_inside_longer():
    glossary = {"Continuous Integration": "a", "Integration": "b"}
    result = annotate("Continuous Integration beats late Integration.", glossary)
    assert result == (
        f"{mark('Continuous Integration')} beats late {mark('Integration')}."
    )
    assert result.count("glossary-term data-term") == 2


def test_fenced_code_untouched():
    text = "```CI/CD appears here```"
    assert annotate(text, {"CI/CD": "..."}) == text


def test_fence_with_surrounding_text():
    text = "CI first\n```yaml\nrun: CI\n```\nthen CI"
    result = annotate(text, {"CI": "..."})
    assert result == f"{mark('CI')} first\n```yaml\nrun: CI\n```\nthen {mark('CI')}"


def test_unterminated_fence_swallows_rest():
    text = "Intro CI\n```\nCI inside never closed"
    result = annotate(text, {"CI": "..."})
    assert result == f"Intro {mark('CI')}\n```\nCI inside never closed"


def test_case_insensitive_keeps_surface_and_canonical_key():
    result = annotate("We use sast daily.", {"SAST": "Static testing"})
    assert result == f"We use {mark('SAST', 'sast')} daily."


def test_whole_word_only():
    glossary = {"CI": "..."}
    assert annotate("CIRCLE and DECIDE", glossary) == "CIRCLE and DECIDE"
    assert annotate("(CI)", glossary) == f"({mark('CI')})"


def test_terms_with_symbols_at_edges():
    glossary = {"C++": "A language", ".NET": "A platform"}
    result = annotate("C++ and .NET apps, not ASP.NET", glossary)
    assert result == f"{mark('C++')} and {mark('.NET')} apps, not ASP.NET"


def test_term_with_regex_metacharacters():
    glossary = {"Metrics & KPIs": "...", "SLSA (v1)": "..."}
    result = annotate("Track Metrics & KPIs under SLSA (v1).", glossary)
    assert mark("Metrics &amp; KPIs", "Metrics & KPIs") in result
    assert mark("SLSA (v1)") in result


def test_every_occurrence_marked():
    result = annotate("CI, CI and ci", {"CI": "..."})
    assert result.count("<glossary-term") == 3


def test_empty_inputs_returned_unchanged():
    assert annotate("", GLOSSARY) == ""
    assert annotate("plain CI text", {}) == "plain CI text"
    assert annotate("plain text", {"": "blank", "  ": "spaces"}) == "plain text"


def test_deterministic():
    text = "CI/CD with CI and ```CI``` then CI/CD"
    assert annotate(text, GLOSSARY) == annotate(text, GLOSSARY)


def test_split_code_fences_round_trips():
    text = "a ```b``` c ```d"
    segments = split_code_fences(text)
    assert [s.kind for s in segments] == [TEXT, CODE, TEXT, CODE]
    assert "".join(s.text for s in segments) == text


def test_split_code_fences_without_fences():
    segments = split_code_fences("just text")
    assert len(segments) == 1
    assert segments[0].kind == TEXT


def test_split_code_fences_adjacent_blocks():
    segments = split_code_fences("```a``````b```")
    assert [s.text for s in segments] == ["```a```", "```b```"]
    assert all(s.kind == CODE for s in segments)


def test_annotated_terms_in_first_seen_order():
    text = annotate("CI then CI/CD then CI again", GLOSSARY)
    assert annotated_terms(text) == ["CI", "CI/CD"]


def test_annotated_terms_unescapes_keys():
    text = annotate("Metrics & KPIs", {"Metrics & KPIs": "..."})
    assert annotated_terms(text) == ["Metrics & KPIs"]


def test_render_markers_default_bold():
    text = annotate("Use ci daily", {"CI": "..."})
    assert render_markers(text) == "Use **ci** daily"


def test_render_markers_custom_template():
    text = annotate("Use ci daily", {"CI": "..."})
    assert render_markers(text, "{surface} ({term})") == "Use ci (CI) daily"


def test_render_markers_leaves_inline_code_and_link_targets():
    text = annotate("Run `ci --fast` and see [CI docs](https://ci.example.com).", {"CI": "x"})
    assert render_markers(text) == "Run `ci --fast` and see [**CI** docs](https://ci.example.com)."


def test_render_markers_link_target_with_parenthesized_term():
    text = annotate("[guide](https://x.io/SLSA (v1))", {"SLSA (v1)": "..."})
    assert render_markers(text) == "[guide](https://x.io/SLSA (v1))"


def test_render_markers_inline_code_after_fence():
    text = annotate("```\nCI\n``` then `x` CI `y`", {"CI": "..."})
    assert render_markers(text) == "```\nCI\n``` then `x` **CI** `y`"
