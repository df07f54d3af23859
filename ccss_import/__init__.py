"""Import the Common Core State Standards as competency frameworks.

Subpackages:
    hierarchy: extract standards documents and synthesize missing ancestors
    importer: create frameworks and competencies in parent-before-child order
"""

__version__ = "0.1.0"
