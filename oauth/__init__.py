"""GitHub OAuth relay: origin policy, state codec, provider client and routes."""
