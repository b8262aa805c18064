from formbridge.data.fields import ModelField
from formbridge.data.model import DataModel, SqlaDataModel, SqlaReference

__all__ = ["ModelField", "DataModel", "SqlaDataModel", "SqlaReference"]
