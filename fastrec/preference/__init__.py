"""
Preference Module: Dual-Indexed Sparse Preference Store
"""

from fastrec.preference.store import PreferenceStore

__all__ = ["PreferenceStore"]
