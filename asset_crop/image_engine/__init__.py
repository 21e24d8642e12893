"""Image Engine - codec, sampler and asset source backed by pyvips.

Usage:
    from asset_crop.image_engine.codec import VipsCodec
    from asset_crop.image_engine.source import FileAssetSource, asset_from_file
"""
