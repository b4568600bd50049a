"""
Asset browser for remote texture stores.

The browser side of the texture gateway:
- Crawl a remote directory listing into a folder -> files catalog
- Load a selected file onto one material slot or shader uniform
- Save the current texture back through the gateway server

Import from the submodules (asset_browser.BrowseSession, asset_browser.AssetKinds, ...);
the package itself stays import-light so utils.Args can validate asset kinds
without pulling in Pillow or BeautifulSoup.
"""
