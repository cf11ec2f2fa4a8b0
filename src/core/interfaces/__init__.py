"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos.
- Permite invertir dependencias: el cliente HTTP depende de un almacén de
  tokens abstracto, no de un fichero ni de la memoria del proceso.
"""
