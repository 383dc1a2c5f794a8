"""Examiner command-line interface (see ``app``)."""
