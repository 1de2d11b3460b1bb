"""Infrastructure layer - the player process and its text protocol.

This layer contains implementations for:
- Process supervision (spawn, output pumping, interrupt)
- Slave-mode protocol (command vocabulary, output classification)
"""
