"""In-memory stand-ins for the Firestore client surface used by TokenStore."""
import copy


def _merge(target: dict, data: dict) -> None:
    for key, value in data.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _merge(target[key], value)
        else:
            target[key] = copy.deepcopy(value)


class FakeSnapshot:
    def __init__(self, data):
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocument:
    def __init__(self, docs: dict, doc_id: str):
        self.docs = docs
        self.id = doc_id

    def set(self, data, merge=False):
        if merge and self.id in self.docs:
            _merge(self.docs[self.id], data)
        else:
            self.docs[self.id] = copy.deepcopy(data)

    def get(self):
        return FakeSnapshot(self.docs.get(self.id))


class FakeCollection:
    def __init__(self, docs: dict):
        self.docs = docs

    def document(self, doc_id):
        return FakeDocument(self.docs, doc_id)


class FakeFirestore:
    """The slice of google.cloud.firestore.Client that TokenStore uses."""

    def __init__(self):
        self.collections: dict[str, dict] = {}

    def collection(self, name):
        return FakeCollection(self.collections.setdefault(name, {}))


