"""Caller-side client (submit + poll)"""

from .poller import JobPoller, PollState, PollUpdate, ProgressSimulator

__all__ = ["JobPoller", "PollState", "PollUpdate", "ProgressSimulator"]
