"""Adapters: everything that touches the filesystem.

- `patchers`: the Gradle, plist and pbxproj rewriters.
- `package_manifest`: reads the version out of package.json.
"""
