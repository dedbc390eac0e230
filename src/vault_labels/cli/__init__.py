"""Command line entry points (``labels-verify`` and ``labels-fix``)."""
