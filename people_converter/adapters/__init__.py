"""Adapters bridging the converter to external libraries.

WHY: Formatters should not depend on a serializer's API directly. The
xml_tree adapter exposes the small element-building interface they
need on top of lxml, plus the charset-aware sink every document is
written through.
"""
