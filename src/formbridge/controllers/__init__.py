from formbridge.controllers.model_form import TYPE_ASSOCIATIONS, ModelFormController

__all__ = ["TYPE_ASSOCIATIONS", "ModelFormController"]
