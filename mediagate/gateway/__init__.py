"""Media Generation Gateway Layer.

Routes provider-agnostic generation requests (text, image, voice, video)
to third-party vendor APIs:
  - Vendor Adapters (one per vendor: endpoint, auth, payload, response shape)
  - Adapter Registry (exact provider match, then OpenAI-compatible fallback)
  - Dispatcher (credential resolution + adapter selection)
  - Generation Gateway (validation and error → HTTP status translation)
  - Media Store (addressable URLs for binary vendor output)
"""
