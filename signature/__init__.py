"""
Signature injection feature.

Renders form fields (signature image, text, date, radio mark, image placeholder)
onto a fixed base PDF, stores the result and records a hash-anchored audit entry
linking the original document, the signed document and the fields used.
"""
