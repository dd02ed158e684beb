"""
General-purpose helpers not related to the engine itself
(neither to the polling nor to the scaling nor to the structs),
which are used to prepare and control the runtime environment.

As a rule of thumb, helpers MUST be abstracted from the package
to such an extent that they could be extracted as reusable libraries.
If they implement concepts of the package, they are not "helpers"
(consider making them structs, clients, or engines).
"""
