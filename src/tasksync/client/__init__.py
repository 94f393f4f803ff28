"""
Client state synchronization engine.

Components:
- ids.py: temporary vs permanent task ids
- state.py: immutable state tree (draft + task list)
- actions.py: one immutable class per action kind
- reducer.py: pure (State, Action) -> State
- selectors.py: read-only derivations
- effects.py: async workflows that talk to the API and dispatch results
- store.py: dispatch / get_state / subscribe around one action stream
- api_client.py: httpx-based ApiClient
"""
