"""
Tests for Timeline and Clip.
"""
import pytest
import numpy as np

from podmix.core.clip import Clip
from podmix.core.config import EngineConfig
from podmix.core.effects import CompressorEffect, ReverbEffect
from podmix.core.errors import ClipNotFound, InvalidPlacement, TrackCapacityError
from podmix.core.timeline import Timeline


class TestClip:
    """Tests for the Clip record."""

    def test_window_and_midpoint(self):
        clip = Clip(id=1, asset_id="a", track_index=0, start_time=2.0, end_time=6.0, duration=3.0)
        assert clip.window_length == 4.0
        assert clip.midpoint == 4.0

    def test_inverted_window_rejected(self):
        with pytest.raises(ValueError):
            Clip(id=1, asset_id="a", track_index=0, start_time=2.0, end_time=1.0, duration=1.0)

    def test_overlaps(self):
        a = Clip(id=1, asset_id="a", track_index=0, start_time=0.0, end_time=5.0, duration=5.0)
        b = Clip(id=2, asset_id="b", track_index=0, start_time=3.0, end_time=8.0, duration=5.0)
        c = Clip(id=3, asset_id="c", track_index=0, start_time=5.0, end_time=6.0, duration=1.0)
        assert a.overlaps(b)
        assert not a.overlaps(c)

    def test_is_immutable(self):
        clip = Clip(id=1, asset_id="a", track_index=0, start_time=0.0, end_time=1.0, duration=1.0)
        with pytest.raises(AttributeError):
            clip.start_time = 3.0


class TestTimelineAdd:
    """Adding clips and derived quantities."""

    def test_add_clip_defaults(self, empty_timeline):
        clip = empty_timeline.add_clip("voice", 12.5)
        assert clip.start_time == 0.0
        assert clip.end_time == 12.5
        assert clip.duration == 12.5
        assert clip.gain == 1.0
        assert clip.track_index == 0
        assert clip.name == "voice"
        assert clip.effects == ()

    def test_add_allocates_lowest_free_track(self, empty_timeline):
        a = empty_timeline.add_clip("a", 1.0)
        b = empty_timeline.add_clip("b", 1.0)
        c = empty_timeline.add_clip("c", 1.0, track_index=3)
        d = empty_timeline.add_clip("d", 1.0)
        assert [a.track_index, b.track_index, c.track_index, d.track_index] == [0, 1, 3, 2]

    def test_ids_are_unique_and_ordered(self, empty_timeline):
        ids = [empty_timeline.add_clip(f"a{i}", 1.0).id for i in range(3)]
        assert len(set(ids)) == 3
        assert [c.id for c in empty_timeline.clips] == sorted(ids)

    def test_add_buffer_uses_buffer_length(self, empty_timeline, sample_stereo_buffer):
        clip = empty_timeline.add_buffer("music", sample_stereo_buffer, name="Music")
        assert np.isclose(clip.duration, 1.0)
        assert clip.name == "Music"

    def test_add_rejects_bad_track(self, empty_timeline):
        with pytest.raises(InvalidPlacement):
            empty_timeline.add_clip("a", 1.0, track_index=4)

    def test_add_rejects_negative_start(self, empty_timeline):
        with pytest.raises(InvalidPlacement):
            empty_timeline.add_clip("a", 1.0, start_time=-1.0)

    def test_window_may_differ_from_duration(self, empty_timeline):
        clip = empty_timeline.add_clip("a", 4.0, start_time=1.0, end_time=2.0)
        assert clip.window_length == 1.0
        assert clip.duration == 4.0

    def test_gain_is_clamped(self, empty_timeline):
        assert empty_timeline.add_clip("a", 1.0, gain=9.0).gain == 2.0
        assert empty_timeline.add_clip("b", 1.0, gain=-1.0).gain == 0.0

    def test_full_timeline_shares_track_zero(self, empty_timeline):
        for i in range(4):
            empty_timeline.add_clip(f"a{i}", 1.0)
        assert empty_timeline.add_clip("extra", 1.0).track_index == 0

    def test_full_timeline_strict(self):
        timeline = Timeline(EngineConfig(max_tracks=2, strict_track_allocation=True))
        timeline.add_clip("a", 1.0)
        timeline.add_clip("b", 1.0)
        with pytest.raises(TrackCapacityError):
            timeline.add_clip("c", 1.0)
        assert len(timeline) == 2


class TestTimelineDuration:
    """Timeline duration and occupancy."""

    def test_duration_floor_when_empty(self, empty_timeline):
        assert empty_timeline.duration() == 300.0
        assert empty_timeline.content_duration() == 0.0

    def test_duration_uses_latest_end(self):
        timeline = Timeline(EngineConfig(timeline_floor_seconds=10.0))
        timeline.add_clip("a", 4.0, start_time=3.0)
        timeline.add_clip("b", 20.0)
        assert timeline.duration() == 20.0

    def test_duration_never_below_floor(self, empty_timeline):
        empty_timeline.add_clip("a", 5.0)
        assert empty_timeline.duration() == 300.0

    def test_view_duration_pads_content(self, empty_timeline):
        empty_timeline.add_clip("a", 400.0)
        assert empty_timeline.view_duration() == 430.0

    def test_occupancy_is_derived(self, empty_timeline):
        a = empty_timeline.add_clip("a", 1.0)
        empty_timeline.add_clip("b", 1.0)
        assert empty_timeline.occupied_tracks() == {0, 1}
        empty_timeline.delete_clip(a.id)
        assert empty_timeline.occupied_tracks() == {1}
        assert not empty_timeline.is_track_occupied(0)

    def test_clip_at(self, empty_timeline):
        clip = empty_timeline.add_clip("a", 5.0, start_time=2.0)
        assert empty_timeline.clip_at(3.0, 0) == clip
        assert empty_timeline.clip_at(1.0, 0) is None
        assert empty_timeline.clip_at(3.0, 1) is None

    def test_overlapping_pairs_are_reported(self, empty_timeline):
        a = empty_timeline.add_clip("a", 5.0, track_index=2)
        b = empty_timeline.add_clip("b", 5.0, start_time=3.0, track_index=2)
        empty_timeline.add_clip("c", 5.0, start_time=3.0, track_index=1)
        assert empty_timeline.overlapping_pairs() == [(a, b)]


class TestTimelineEditing:
    """Move, delete, duplicate and split."""

    def test_move_preserves_window(self, empty_timeline):
        clip = empty_timeline.add_clip("a", 4.0, start_time=1.0)
        moved = empty_timeline.move_clip(clip.id, 2.5)
        assert moved.start_time == 3.5
        assert moved.end_time == 7.5
        assert empty_timeline.get_clip(clip.id) == moved

    def test_move_clamps_at_zero(self, empty_timeline):
        clip = empty_timeline.add_clip("a", 4.0, start_time=1.0)
        moved = empty_timeline.move_clip(clip.id, -10.0)
        assert moved.start_time == 0.0
        assert moved.end_time == 4.0

    def test_delete(self, empty_timeline):
        clip = empty_timeline.add_clip("a", 1.0)
        removed = empty_timeline.delete_clip(clip.id)
        assert removed == clip
        assert clip.id not in empty_timeline
        assert len(empty_timeline) == 0

    def test_unknown_id(self, empty_timeline):
        with pytest.raises(ClipNotFound):
            empty_timeline.delete_clip(42)
        with pytest.raises(KeyError):
            empty_timeline.get_clip(42)

    def test_duplicate(self, empty_timeline):
        effects = (ReverbEffect(room_size=0.8),)
        clip = empty_timeline.add_clip("a", 4.0, start_time=1.0, gain=0.7, effects=effects)
        copy = empty_timeline.duplicate_clip(clip.id)
        assert copy.id != clip.id
        assert copy.track_index == 1
        assert (copy.start_time, copy.end_time, copy.gain) == (1.0, 5.0, 0.7)
        assert copy.effects == effects
        assert copy.name == "a (Copy)"
        assert len(empty_timeline) == 2

    def test_split_at_window_midpoint(self, empty_timeline):
        clip = empty_timeline.add_clip("a", 6.0, start_time=2.0, end_time=6.0)
        first, second = empty_timeline.split_clip(clip.id)

        assert first.id == clip.id
        assert first.track_index == clip.track_index
        assert (first.start_time, first.end_time) == (2.0, 4.0)

        assert second.id != clip.id
        assert second.track_index == 1
        assert (second.start_time, second.end_time) == (4.0, 6.0)
        assert second.source_offset == 2.0
        assert second.duration == first.duration == 6.0
        assert empty_timeline.get_clip(clip.id) == first

    def test_set_gain_and_track(self, empty_timeline):
        clip = empty_timeline.add_clip("a", 1.0)
        assert empty_timeline.set_gain(clip.id, 0.25).gain == 0.25
        assert empty_timeline.set_track(clip.id, 3).track_index == 3
        with pytest.raises(InvalidPlacement):
            empty_timeline.set_track(clip.id, -1)

    def test_set_effects(self, empty_timeline):
        clip = empty_timeline.add_clip("a", 1.0)
        updated = empty_timeline.set_effects(clip.id, [CompressorEffect(ratio=2.0)])
        assert updated.effects == (CompressorEffect(ratio=2.0),)

    def test_readers_keep_snapshot(self, empty_timeline):
        clip = empty_timeline.add_clip("a", 1.0)
        snapshot = empty_timeline.clips
        empty_timeline.move_clip(clip.id, 5.0)
        assert snapshot[0].start_time == 0.0


class TestTimelineUndo:
    """Undo/redo of timeline edits."""

    def test_undo_add(self, empty_timeline):
        empty_timeline.add_clip("a", 1.0)
        assert empty_timeline.undo()
        assert len(empty_timeline) == 0
        assert empty_timeline.redo()
        assert len(empty_timeline) == 1

    def test_undo_move(self, empty_timeline):
        clip = empty_timeline.add_clip("a", 1.0)
        empty_timeline.move_clip(clip.id, 3.0)
        empty_timeline.undo()
        assert empty_timeline.get_clip(clip.id).start_time == 0.0

    def test_undo_split_restores_single_clip(self, empty_timeline):
        clip = empty_timeline.add_clip("a", 4.0)
        empty_timeline.split_clip(clip.id)
        empty_timeline.undo()
        assert empty_timeline.clips == [clip]

    def test_undo_delete(self, empty_timeline):
        clip = empty_timeline.add_clip("a", 1.0)
        empty_timeline.delete_clip(clip.id)
        empty_timeline.undo()
        assert empty_timeline.get_clip(clip.id) == clip

    def test_ids_not_reused_after_undo(self, empty_timeline):
        first = empty_timeline.add_clip("a", 1.0)
        empty_timeline.undo()
        second = empty_timeline.add_clip("b", 1.0)
        assert second.id != first.id

    def test_clear(self, empty_timeline):
        empty_timeline.add_clip("a", 1.0)
        empty_timeline.clear()
        assert len(empty_timeline) == 0
        assert not empty_timeline.can_undo
