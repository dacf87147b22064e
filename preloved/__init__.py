"""Client-side core for the preloved marketplace storefront.

Layers follow MVVM + ports/adapters: ``domain`` holds typed entities and port
protocols, ``adapters`` talk to the REST backend and local storage,
``usecases`` orchestrate user actions, ``viewmodels`` keep UI state and
``app`` wires everything together.
"""

__version__ = "0.3.0"
