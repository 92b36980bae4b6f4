"""Core matching, dispatch and OS collaborators for appswitch."""
