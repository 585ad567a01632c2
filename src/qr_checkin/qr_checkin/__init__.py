"""QR attendance check-in package.

Organized by feature modules (decoding, capture, sessions, scanning) with a
thin Flask controller on top of a state machine that owns the camera.
"""
