"""Ordered step lists: `kube` (node bootstrapper) and `shell` (zsh environment)."""
