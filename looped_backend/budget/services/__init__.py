# budget/services/__init__.py
