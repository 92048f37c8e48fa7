import bisect
import hashlib
from typing import Dict, List

from vehicle_api.errors import StoreFailure


class ShardManager:
    """Consistent-hash ring mapping record ids onto blob node URLs."""

    def __init__(self, shard_urls: List[str], replicas: int = 100):
        self.replicas = replicas
        self.ring: Dict[int, str] = {}  # virtual_node_hash -> node url
        self.sorted_keys: List[int] = []

        for url in shard_urls:
            self.add_shard(url)

    def _hash(self, key: str) -> int:
        return int(hashlib.md5(key.encode()).hexdigest(), 16)

    def add_shard(self, url: str):
        url = url.rstrip("/")
        for i in range(self.replicas):
            self.ring[self._hash(f"{url}#{i}")] = url
        self.sorted_keys = sorted(self.ring.keys())

    @property
    def shards(self) -> List[str]:
        return sorted(set(self.ring.values()))

    def get_shard_url(self, key: str) -> str:
        if not self.ring:
            raise StoreFailure("No blob store nodes configured")
        idx = bisect.bisect(self.sorted_keys, self._hash(key))
        # wrap around past the last virtual node
        return self.ring[self.sorted_keys[idx % len(self.sorted_keys)]]
