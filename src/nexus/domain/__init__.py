"""Domain layer for nexus.

Services are imported from their modules (``nexus.domain.import_service``
and so on); this package stays empty so the store layer can import
``nexus.domain.entities`` without a cycle.
"""
