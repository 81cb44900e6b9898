import pytest

from analysis.highlights import select_highlight_clips, selected_clips, total_selected_duration
from analysis.keywords import score_note
from analysis.markers import CUT_COLOR, POSITIVE_COLOR, WARNING_COLOR, build_timeline_markers
from analysis.models import AnalysisReport
from analysis.suggestions import generate_edit_suggestions


def _report(*moments):
    return AnalysisReport.model_validate(
        {"keyMoments": [{"timestamp": ts, "note": note} for ts, note in moments]}
    )


def test_score_note_weights():
    assert score_note("Strong opening hook") == 6
    assert score_note("Great call-to-action") == 5
    # call-to-action and cta count once
    assert score_note("cta / call-to-action") == 2
    assert score_note("Energy dip") == 0
    assert score_note("Weak take, consider re-recording") == -5
    assert score_note("") == 0


def test_default_clip_window():
    clips = select_highlight_clips(_report(("0:03", "Strong opening hook")), 60)

    assert len(clips) == 1
    assert clips[0].start_time == pytest.approx(2.5)
    assert clips[0].end_time == pytest.approx(8.5)
    assert clips[0].selected is True
    assert clips[0].note == "Strong opening hook"


def test_explicit_range_extends_past_its_end():
    clips = select_highlight_clips(_report(("0:10-0:14", "Great energy")), 60)

    assert clips[0].start_time == pytest.approx(9.5)
    assert clips[0].end_time == pytest.approx(18.5)


def test_clip_is_clamped_to_duration():
    clips = select_highlight_clips(_report(("0:58", "Great finish")), 60)

    assert clips[0].start_time == pytest.approx(57.5)
    assert clips[0].end_time == 60


def test_moment_past_the_end_is_dropped():
    clips = select_highlight_clips(_report(("2:00", "Great outro"), ("0:05", "Good hook")), 60)

    assert [c.note for c in clips] == ["Good hook"]


def test_only_positive_moments_are_kept():
    clips = select_highlight_clips(
        _report(
            ("0:05", "Energy dip"),
            ("0:10", "Awkward, consider re-recording"),
            ("0:15", "Authentic moment"),
        ),
        60,
    )
    assert [c.note for c in clips] == ["Authentic moment"]


def test_at_most_five_clips_sorted_by_start_time():
    moments = [
        ("0:50", "Good wrap"),
        ("0:40", "Strong hook callback"),
        ("0:30", "Great energy"),
        ("0:20", "Engaging story"),
        ("0:10", "Authentic aside"),
        ("0:05", "Strong great hook"),
        ("0:45", "Nice"),
    ]
    clips = select_highlight_clips(_report(*moments), 120)

    assert len(clips) == 5
    starts = [c.start_time for c in clips]
    assert starts == sorted(starts)
    assert all(c.start_time < c.end_time for c in clips)
    notes = [c.note for c in clips]
    assert "Strong great hook" in notes
    assert "Nice" not in notes
    # three moments tie at 2; the one listed last in the report is cut
    assert "Authentic aside" not in notes
    assert "Good wrap" in notes


def test_empty_key_moments():
    assert select_highlight_clips(AnalysisReport(), 60) == []


def test_selection_helpers():
    clips = select_highlight_clips(_report(("0:03", "Strong hook"), ("0:30", "Great close")), 60)
    clips[0].toggle()

    assert [c.note for c in selected_clips(clips)] == ["Great close"]
    assert total_selected_duration(clips) == pytest.approx(clips[1].end_time - clips[1].start_time)


def test_timeline_markers():
    report = AnalysisReport.model_validate(
        {
            "pacing": {"score": 4, "timestamps": [{"timestamp": "0:20-0:24", "note": "Energy dip"}]},
            "keyMoments": [
                {"timestamp": "0:03", "note": "Strong hook"},
                {"timestamp": "0:20", "note": "Energy dip"},
            ],
        }
    )
    markers = build_timeline_markers(report, generate_edit_suggestions(report, 60))

    assert [(m.kind, m.time, m.color) for m in markers] == [
        ("keyMoment", 3, POSITIVE_COLOR),
        ("keyMoment", 20, WARNING_COLOR),
        ("suggestion", 20, CUT_COLOR),
    ]
