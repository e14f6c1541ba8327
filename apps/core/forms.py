# apps/core/forms.py

"""
Validação dos payloads da API

Os dados chegam como JSON (dict) e passam pelos forms do Django como em
qualquer view. Forms de atualização são parciais: só os campos enviados
são validados e devolvidos em cleaned_data.
"""

from django import forms
from django.conf import settings
from django.core.exceptions import ValidationError


class CredentialsForm(forms.Form):
    """Registro e login usam o mesmo par username/senha"""

    username = forms.CharField(max_length=150, strip=True)
    password = forms.CharField(strip=False)


class RegisterForm(CredentialsForm):

    def clean_password(self):
        password = self.cleaned_data['password']
        minimo = settings.RAIA_PASSWORD_MIN_LENGTH

        if len(password) < minimo:
            raise ValidationError(f'Senha deve ter pelo menos {minimo} caracteres')

        return password


class ChangePasswordForm(forms.Form):
    """Troca de senha - nomes de campo iguais aos do payload JSON"""

    oldPassword = forms.CharField(strip=False)
    newPassword = forms.CharField(strip=False)


class PartialUpdateForm(forms.Form):
    """
    Base dos forms de atualização parcial

    Remove os campos que não vieram no payload; se nenhum campo
    conhecido vier, o form é inválido.
    """

    def __init__(self, data=None, *args, **kwargs):
        super().__init__(data, *args, **kwargs)
        if data is not None:
            for name in list(self.fields):
                if name not in data:
                    del self.fields[name]

    def clean(self):
        cleaned_data = super().clean()
        if not self.fields:
            raise ValidationError('Nenhum campo para atualizar')
        return cleaned_data


# === PROJETOS ===

class ProjectForm(forms.Form):
    name = forms.CharField(max_length=200)
    description = forms.CharField(required=False, strip=False)


class ProjectUpdateForm(PartialUpdateForm):
    name = forms.CharField(max_length=200)
    description = forms.CharField(required=False, strip=False)


# === COLUNAS ===

COLOR_FIELD_KWARGS = {
    'regex': r'^#[0-9a-fA-F]{6}$',
    'error_messages': {'invalid': 'Cor deve estar no formato #rrggbb'},
}


class ColumnCreateForm(forms.Form):
    title = forms.CharField(max_length=100)
    project_id = forms.IntegerField()
    color = forms.RegexField(required=False, **COLOR_FIELD_KWARGS)

    def clean_color(self):
        return self.cleaned_data.get('color') or settings.RAIA_DEFAULT_COLUMN_COLOR


class ColumnUpdateForm(PartialUpdateForm):
    title = forms.CharField(max_length=100)
    color = forms.RegexField(**COLOR_FIELD_KWARGS)


# === TAREFAS ===

PRIORITY_FIELD_KWARGS = {
    'min_value': 1,
    'max_value': 5,
    'error_messages': {
        'min_value': 'Prioridade deve estar entre 1 e 5',
        'max_value': 'Prioridade deve estar entre 1 e 5',
    },
}


class TaskCreateForm(forms.Form):
    title = forms.CharField(max_length=200)
    column_id = forms.IntegerField()
    description = forms.CharField(required=False, strip=False)
    priority = forms.IntegerField(required=False, **PRIORITY_FIELD_KWARGS)

    def clean_priority(self):
        priority = self.cleaned_data.get('priority')
        return 3 if priority is None else priority


class TaskUpdateForm(PartialUpdateForm):
    """
    Atualização parcial de tarefa

    column_id e order_index juntos equivalem a mover a tarefa sem
    passar pelo lote de reordenação.
    """

    title = forms.CharField(max_length=200)
    description = forms.CharField(required=False, strip=False)
    column_id = forms.IntegerField()
    priority = forms.IntegerField(**PRIORITY_FIELD_KWARGS)
    order_index = forms.IntegerField(min_value=0)


# === ANEXOS ===

class AttachmentUploadForm(forms.Form):
    file = forms.FileField(error_messages={'required': 'Nenhum arquivo enviado'})

    def clean_file(self):
        arquivo = self.cleaned_data['file']
        limite = settings.RAIA_MAX_UPLOAD_SIZE

        if arquivo.size > limite:
            raise ValidationError(f'Arquivo excede o limite de {limite // (1024 * 1024)} MB')

        return arquivo
