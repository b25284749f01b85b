class CacheAPI(object):
    """
    Contract for how upload progress is persisted.
    Implementation can use SQLite, files, etc.,
    but must keep the same method names and parameters.
    """

    def save_link(self, key, link, name=None):
        raise NotImplementedError()

    def save_bundle_result(self, result):
        raise NotImplementedError()

    def load_link(self, key):
        raise NotImplementedError()

    def list_items(self):
        raise NotImplementedError()

    def pending_assets(self, assets):
        raise NotImplementedError()
