"""Trailer video id lookup."""

from moviegrid.video.lookup import ScrapeVideoLookup, VideoLookup, extract_video_id

__all__ = ["ScrapeVideoLookup", "VideoLookup", "extract_video_id"]
