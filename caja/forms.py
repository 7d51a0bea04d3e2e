# caja/forms.py

from django import forms
from .models import Caja, Arqueo, Traslado
from .calculos import evaluar_arqueo
from .historial import FiltrosHistorial

MONTO_WIDGET = forms.NumberInput(attrs={'class': 'form-control form-control-lg', 'placeholder': '0.00', 'step': '0.01', 'min': '0'})
COMENTARIO_WIDGET = forms.Textarea(attrs={'class': 'form-control', 'rows': 3, 'placeholder': 'Explica el motivo de la diferencia si existe...'})


# --- FORMULARIOS DEL CICLO DE CAJA ---

class AperturaCajaForm(forms.Form):
    caja = forms.ModelChoiceField(queryset=Caja.objects.filter(activa=True), label="Caja",
                                  widget=forms.Select(attrs={'class': 'form-select'}))
    monto_inicial = forms.DecimalField(max_digits=12, decimal_places=2, min_value=0,
                                       label="Fondo inicial en caja (USD)", widget=MONTO_WIDGET)


class ArqueoCajaForm(forms.Form):
    monto_contado = forms.DecimalField(max_digits=12, decimal_places=2, min_value=0,
                                       label="Monto Contado (USD)", widget=MONTO_WIDGET)
    comentario = forms.CharField(required=False, label="Comentario", widget=COMENTARIO_WIDGET)

    def __init__(self, *args, **kwargs):
        self.esperado = kwargs.pop('esperado')
        self.umbral = kwargs.pop('umbral')
        super().__init__(*args, **kwargs)

    def clean(self):
        cleaned_data = super().clean()
        contado = cleaned_data.get('monto_contado')
        resultado = evaluar_arqueo(contado, self.esperado, self.umbral)
        cleaned_data['diferencia'] = resultado.diferencia
        cleaned_data['requiere_comentario'] = resultado.requiere_comentario
        if resultado.requiere_comentario and not (cleaned_data.get('comentario') or '').strip():
            self.add_error('comentario', f"La diferencia supera ${self.umbral}. Debes agregar un comentario.")
        return cleaned_data


class ArqueoChoiceField(forms.ModelChoiceField):
    def label_from_instance(self, obj):
        turno = obj.apertura.turno
        return f"{turno.caja.nombre} - {turno.fecha:%d/%m/%Y} - Contado ${obj.monto_contado}"


class TrasladoEfectivoForm(forms.Form):
    arqueo = ArqueoChoiceField(queryset=Arqueo.objects.none(), label="Arqueo de origen",
                               widget=forms.Select(attrs={'class': 'form-select'}))
    caja_destino = forms.ModelChoiceField(queryset=Caja.objects.filter(activa=True), label="Caja destino",
                                          widget=forms.Select(attrs={'class': 'form-select'}))
    monto = forms.DecimalField(max_digits=12, decimal_places=2, min_value=0, label="Monto a trasladar (USD)",
                               widget=MONTO_WIDGET)
    comentario = forms.CharField(required=False, label="Comentario",
                                 widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 2}))

    def __init__(self, *args, **kwargs):
        perfil = kwargs.pop('perfil')
        super().__init__(*args, **kwargs)
        self.fields['arqueo'].queryset = (
            Arqueo.objects.filter(apertura__turno__usuario=perfil, traslado__isnull=True)
            .select_related('apertura__turno__caja')
        )
        principal = Caja.objects.filter(activa=True, es_principal=True).first()
        if principal and not self.is_bound:
            self.fields['caja_destino'].initial = principal.pk


class TrasladoChoiceField(forms.ModelChoiceField):
    def label_from_instance(self, obj):
        return f"#{obj.id} {obj.caja_origen.nombre} → {obj.caja_destino.nombre} - ${obj.monto}"


class RecepcionTrasladoForm(forms.Form):
    traslado = TrasladoChoiceField(
        queryset=Traslado.objects.filter(estado=Traslado.EN_TRANSITO).select_related('caja_origen', 'caja_destino'),
        label="Traslado en tránsito", widget=forms.Select(attrs={'class': 'form-select'}))
    monto_recibido = forms.DecimalField(max_digits=12, decimal_places=2, min_value=0,
                                        label="Monto recibido (USD)", widget=MONTO_WIDGET)
    comentario = forms.CharField(required=False, label="Comentario", widget=COMENTARIO_WIDGET)


# --- FILTROS DEL HISTORIAL ---

class HistorialFiltrosForm(forms.Form):
    TIPOS = [
        ('todas', 'Todas'),
        ('aperturas', 'Aperturas'),
        ('arqueos', 'Arqueos'),
        ('traslados', 'Traslados'),
        ('recepciones', 'Recepciones'),
    ]
    ESTADOS = [
        ('todos', 'Todos'),
        ('activa', 'Activa'),
        ('cerrada', 'Cerrada'),
        ('diferencia', 'Con diferencia'),
        ('transito', 'En tránsito'),
    ]

    tipo = forms.ChoiceField(choices=TIPOS, required=False, label="Tipo de Operación",
                             widget=forms.Select(attrs={'class': 'form-select'}))
    desde = forms.DateField(required=False, label="Fecha Inicio",
                            widget=forms.DateInput(attrs={'type': 'date', 'class': 'form-control'}))
    hasta = forms.DateField(required=False, label="Fecha Fin",
                            widget=forms.DateInput(attrs={'type': 'date', 'class': 'form-control'}))
    estado = forms.ChoiceField(choices=ESTADOS, required=False, label="Estado",
                               widget=forms.Select(attrs={'class': 'form-select'}))

    def clean(self):
        cleaned_data = super().clean()
        desde, hasta = cleaned_data.get('desde'), cleaned_data.get('hasta')
        if desde and hasta and desde > hasta:
            raise forms.ValidationError("La fecha de inicio no puede ser posterior a la fecha fin.")
        return cleaned_data

    def filtros(self):
        datos = self.cleaned_data
        return FiltrosHistorial(
            tipo=datos.get('tipo') or 'todas',
            desde=datos.get('desde'),
            hasta=datos.get('hasta'),
            estado=datos.get('estado') or 'todos',
        )
