"""Tile acquisition core: probing, remote fetching, archive handling, decoding."""
