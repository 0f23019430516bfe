from .client import WholeCellClient, WholeCellPage
from .mapper import map_wholecell_record, MappedItem

__all__ = ['WholeCellClient', 'WholeCellPage', 'map_wholecell_record', 'MappedItem']
