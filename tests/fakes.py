"""Test doubles for the datasource's external collaborators."""

from tsgraph.models import DataPoint


def points(*pairs):
    """Build a series from (timestamp, value) pairs."""
    return [DataPoint(timestamp=ts, value=str(value)) for ts, value in pairs]


class FakeClient:
    """Transport stand-in returning a canned payload and recording requested URLs."""

    def __init__(self, payload="", error=None):
        self.payload = payload
        self.error = error
        self.urls = []

    def fetch(self, url):
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.payload


class PassthroughDownsampler:
    """Downsampler stand-in that only applies the window."""

    def __init__(self):
        self.calls = []

    def downsample(self, points, interval, method, start, end):
        self.calls.append((interval, method, start, end))
        return [point for point in points if start <= point.timestamp <= end]
