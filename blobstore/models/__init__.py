from blobstore.models.config import StoreConfig, load_env_file

__all__ = ["StoreConfig", "load_env_file"]
