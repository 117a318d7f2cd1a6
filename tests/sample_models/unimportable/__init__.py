"""Package whose submodule fails at import time."""
