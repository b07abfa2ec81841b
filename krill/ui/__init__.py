"""
Terminal UI for the Krill text editor: key decoding, key handling and drawing.
"""
