"""Academy Console package.

Server-rendered admin console for academy management. Feature modules
(students, consultations, training, ...) follow the same layering:
model -> repository protocol -> HTTP repository -> service -> Flask controller.
The remote REST API owns all business rules.
"""
