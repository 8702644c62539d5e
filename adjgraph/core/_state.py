class _State:
    def __init__(self):
        self.version = 0
        self._backend_cache = {}

    def bump(self):
        self.version += 1
        self._backend_cache.clear()

    def dirty_since(self, version: int) -> bool:
        return self.version > version

    def cached(self, key):
        entry = self._backend_cache.get(key)
        if entry is None or self.dirty_since(entry["version"]):
            return None
        return entry["value"]

    def store(self, key, value):
        self._backend_cache[key] = {"value": value, "version": self.version}
        return value
