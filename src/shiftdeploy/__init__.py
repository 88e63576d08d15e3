"""shiftdeploy — OpenShift v2 application management for CI build steps."""

__version__ = "0.1.0"
