"""Binary codec for asset registry index files.

Submodules are imported directly (``assetreg.codec.registry`` etc.); the
package namespace stays empty so path helpers can import constants without
pulling in the registry.
"""
