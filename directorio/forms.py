from django import forms

from .models import IDIOMA_CHOICES, TIPO_CONTACTO_CHOICES, MensajeContacto


class ContactoForm(forms.ModelForm):
    """Valida el payload del formulario de contacto."""

    nombre = forms.CharField(min_length=2, max_length=255)
    email = forms.EmailField(max_length=255)
    asunto = forms.CharField(min_length=5, max_length=255)
    mensaje = forms.CharField(min_length=10, max_length=5000)
    telefono = forms.CharField(max_length=50, required=False)
    tipo = forms.ChoiceField(choices=TIPO_CONTACTO_CHOICES, required=False)
    idioma = forms.ChoiceField(choices=IDIOMA_CHOICES)

    class Meta:
        model = MensajeContacto
        fields = ("nombre", "email", "telefono", "asunto", "mensaje", "tipo", "idioma")

    # Nombres de campo del cliente JS -> campos del modelo
    CAMPOS_JSON = {
        "name": "nombre",
        "email": "email",
        "phone": "telefono",
        "subject": "asunto",
        "message": "mensaje",
        "type": "tipo",
        "language": "idioma",
    }

    @classmethod
    def desde_json(cls, payload):
        datos = {campo: payload.get(clave) for clave, campo in cls.CAMPOS_JSON.items()}
        datos = {campo: valor for campo, valor in datos.items() if valor is not None}
        return cls(data=datos)

    def clean_tipo(self):
        return self.cleaned_data.get("tipo") or "general"


class ResenaForm(forms.Form):
    rating = forms.IntegerField(min_value=1, max_value=5)
    comment = forms.CharField(max_length=5000, strip=True)
    locale = forms.ChoiceField(choices=IDIOMA_CHOICES, required=False)

    def clean_locale(self):
        return self.cleaned_data.get("locale") or "es"


class NewsletterForm(forms.Form):
    email = forms.EmailField()
    name = forms.CharField(max_length=100, required=False)
    language = forms.ChoiceField(choices=IDIOMA_CHOICES, required=False)

    def clean_email(self):
        return self.cleaned_data["email"].strip().lower()

    def clean_language(self):
        return self.cleaned_data.get("language") or "es"
