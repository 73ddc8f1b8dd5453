"""The "dynamic API" serves CRUD operations on endpoints that tenants declare at runtime.

An endpoint is a name with a list of typed fields. It's stored in the schema registry
(:class:`~endpoint_api.dynamic_api.models.EndpointDefinition` and
:class:`~endpoint_api.dynamic_api.models.FieldDefinition`). All requests to
``/api/{endpoint_name}`` are handled by the same view, which passes them
to the :class:`~endpoint_api.dynamic_api.dispatcher.DynamicDispatcher`.

.. graphviz::

   digraph foo {

      view [label="views.DynamicEndpointView"]
      dispatcher [label="dispatcher.DynamicDispatcher"]
      resolver [label="resolver.resolve_endpoint"]
      validation [label="validation"]
      storage [label="storage.DocumentStore"]

      view -> dispatcher
      dispatcher -> resolver
      dispatcher -> validation
      dispatcher -> storage
      storage -> validation
   }

|
"""
