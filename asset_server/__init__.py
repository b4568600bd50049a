"""
Texture gateway server: resource proxy and texture persistence over HTTP.
"""
