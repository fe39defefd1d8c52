"""Release orchestrator for lerna-managed multi-package workspaces."""
