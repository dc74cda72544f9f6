"""Session tokens, login flow and request gating."""
