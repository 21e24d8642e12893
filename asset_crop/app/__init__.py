"""Application-facing state objects.

- `session.CropSession` owns what outlives a single picker (shared crop parameters).
- `state.crop_state.CropState` is the bindable crop view state.
"""
