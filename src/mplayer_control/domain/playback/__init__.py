"""Playback bounded context: signals, state machine and result records."""
