"""
Specification Views.

API views for product specifications, their rows and the Excel import
of rows. Everything here is visible only to the owner of the project.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from django.db import transaction
from django.db.models import Max
from openpyxl import load_workbook
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.response import Response

from domain.project.ordering import next_order_index, parse_order_entries, find_missing_ids
from domain.shared.exceptions import (
    AuthorizationException,
    EntitiesNotFoundException,
    EntityLockedException,
    EntityNotFoundException,
    ValidationException,
)
from infrastructure.persistence.models import (
    NomenclatureItem,
    ProductSpecification,
    Specification,
)
from ..serializers.specification import (
    ProductSpecificationSerializer,
    SpecificationSerializer,
)
from .base import BaseModelViewSet, HistoryViewMixin, OwnedProductMixin

logger = logging.getLogger(__name__)


# =============================================================================
# EXCEL IMPORT
# =============================================================================

# Column layout: A name, B article, C code1c, D quantity, E price


def _to_str(v: Any) -> str:
    if v is None:
        return ''
    s = str(v).strip()
    return s


def _to_decimal(v: Any):
    if v is None or _to_str(v) == '':
        return None
    try:
        return Decimal(_to_str(v).replace(',', '.').replace(' ', ''))
    except InvalidOperation:
        raise ValueError(v)


@dataclass(frozen=True)
class ExcelImportError:
    row: int
    column: str
    message: str

    def to_dict(self) -> dict:
        return {
            'row': self.row,
            'column': self.column,
            'message': self.message,
        }


def _match_nomenclature(name: str, article: str, code1c: str):
    """Match by article, then 1C code, then name (case-insensitive)."""
    for field, value in (('article', article), ('code1c', code1c), ('name', name)):
        if not value:
            continue
        item = NomenclatureItem.objects.filter(**{f'{field}__iexact': value}).order_by('created_at').first()
        if item is not None:
            return item
    return None


def _parse_specification_excel(file_obj) -> tuple[list[dict], list[ExcelImportError], dict]:
    """
    Parse specification rows from Excel.

    Returns:
        rows: parsed rows with the matched nomenclature item (if any)
        errors: invalid cells across the whole file
        summary: counts
    """
    errors: list[ExcelImportError] = []
    parsed_rows: list[dict] = []

    wb = load_workbook(filename=file_obj, read_only=True, data_only=True)
    try:
        sheet_rows = list(wb.active.iter_rows(min_row=2, max_col=5, values_only=True))
    finally:
        wb.close()

    total_data_rows = 0
    for excel_row_idx, row_cells in enumerate(sheet_rows, start=2):
        values = list(row_cells) if row_cells is not None else []
        while len(values) < 5:
            values.append(None)

        if all((_to_str(v) == '') for v in values[:5]):
            continue

        total_data_rows += 1

        name = _to_str(values[0])
        article = _to_str(values[1])
        code1c = _to_str(values[2])

        row_errors: list[ExcelImportError] = []

        if not (name or article or code1c):
            row_errors.append(ExcelImportError(
                row=excel_row_idx,
                column='A',
                message='Не указано ни наименование, ни артикул, ни код 1С.'
            ))

        quantity = Decimal('1')
        try:
            parsed_quantity = _to_decimal(values[3])
            if parsed_quantity is not None:
                if parsed_quantity <= 0:
                    raise ValueError(values[3])
                quantity = parsed_quantity
        except ValueError:
            row_errors.append(ExcelImportError(
                row=excel_row_idx,
                column='D',
                message=f'Некорректное количество: "{_to_str(values[3])}".'
            ))

        price = None
        try:
            price = _to_decimal(values[4])
            if price is not None and price < 0:
                raise ValueError(values[4])
        except ValueError:
            price = None
            row_errors.append(ExcelImportError(
                row=excel_row_idx,
                column='E',
                message=f'Некорректная цена: "{_to_str(values[4])}".'
            ))

        item = _match_nomenclature(name, article, code1c) if not row_errors else None

        errors.extend(row_errors)
        parsed_rows.append({
            'row': excel_row_idx,
            'name': name,
            'article': article,
            'code1c': code1c,
            'quantity': str(quantity),
            'price': str(price) if price is not None else None,
            'nomenclature_item': str(item.id) if item else None,
            'nomenclature_item_name': item.name if item else None,
            'matched': item is not None,
            'can_import': item is not None and not row_errors,
            'row_errors': [e.to_dict() for e in row_errors],
        })

    summary = {
        'total_rows': total_data_rows,
        'matched_rows': sum(1 for r in parsed_rows if r['matched']),
        'skipped_rows': sum(1 for r in parsed_rows if not r['can_import']),
        'errors_count': len(errors),
    }

    return parsed_rows, errors, summary


# =============================================================================
# VIEWSETS
# =============================================================================

class ProductSpecificationViewSet(OwnedProductMixin, HistoryViewMixin, BaseModelViewSet):
    """
    ViewSet for product specifications.

    Endpoints:
    - GET|POST /products/{product_id}/specifications/
    - GET|PUT|PATCH|DELETE /product-specifications/{id}/
    - POST /product-specifications/{id}/copy/
    - GET /product-specifications/{id}/history/
    - POST /product-specifications/{id}/import-excel/preview/
    - POST /product-specifications/{id}/import-excel/

    A locked specification cannot be changed or deleted.
    """

    serializer_class = ProductSpecificationSerializer
    ordering = ['-created_at']

    def get_queryset(self):
        queryset = ProductSpecification.objects.filter(
            product__project__owner=self.request.user
        ).select_related('product')
        if 'product_pk' in self.kwargs:
            queryset = queryset.filter(product_id=self.kwargs['product_pk'])
        return queryset.order_by('-created_at')

    def list(self, request, *args, **kwargs):
        self.get_owned_product(kwargs.get('product_pk'))
        return super().list(request, *args, **kwargs)

    def perform_create(self, serializer):
        product = self.get_owned_product(self.kwargs.get('product_pk'))
        serializer.save(
            product=product,
            created_by=self.request.user,
            updated_by=self.request.user,
        )

    def _check_not_locked(self, spec):
        if spec.is_locked:
            raise EntityLockedException(
                'Спецификация', spec.pk, 'Спецификация заблокирована для изменений'
            )

    def perform_update(self, serializer):
        self._check_not_locked(serializer.instance)
        super().perform_update(serializer)

    def perform_destroy(self, instance):
        self._check_not_locked(instance)
        instance.delete()
        logger.info('Specification %s deleted by %s', instance.pk, self.request.user.email)

    @action(detail=True, methods=['post'])
    def copy(self, request, pk=None):
        """Copy the specification with its rows and lock the original."""
        original = self.get_object()

        with transaction.atomic():
            original = ProductSpecification.objects.select_for_update().get(pk=original.pk)
            copied = ProductSpecification.objects.create(
                product=original.product,
                name=f'{original.name} (копия)',
                description=original.description,
                version=original.version,
                is_locked=False,
                total_sum=original.total_sum,
                created_by=request.user,
                updated_by=request.user,
            )
            Specification.objects.bulk_create([
                Specification(
                    product_specification=copied,
                    nomenclature_item_id=row.nomenclature_item_id,
                    designation=row.designation,
                    name=row.name,
                    description=row.description,
                    quantity=row.quantity,
                    unit_id=row.unit_id,
                    price=row.price,
                    total_price=row.total_price,
                    order_index=row.order_index,
                    created_by=request.user,
                    updated_by=request.user,
                )
                for row in original.rows.all()
            ])
            original.is_locked = True
            original.save(update_fields=['is_locked', 'updated_at'])

        logger.info('Specification %s copied to %s', original.pk, copied.pk)
        return Response(
            self.get_serializer(copied).data,
            status=status.HTTP_201_CREATED
        )

    def _read_upload(self, request):
        upload = request.FILES.get('file')
        if not upload:
            raise ValidationException('Не передан файл (поле "file").', field='file')
        if not upload.name.lower().endswith('.xlsx'):
            raise ValidationException('Поддерживается только формат .xlsx.', field='file')
        try:
            return _parse_specification_excel(upload)
        except Exception as exc:
            logger.warning('Failed to read Excel file %s: %s', upload.name, exc)
            raise ValidationException(f'Не удалось прочитать Excel файл: {exc}', field='file')

    @action(
        detail=True,
        methods=['post'],
        url_path='import-excel/preview',
        parser_classes=[MultiPartParser, FormParser],
    )
    def import_excel_preview(self, request, pk=None):
        """Preview the import: matched rows, skipped rows and cell errors."""
        self.get_object()
        rows, errors, summary = self._read_upload(request)
        return Response({
            'rows': rows,
            'errors': [e.to_dict() for e in errors],
            'summary': summary,
        })

    @action(
        detail=True,
        methods=['post'],
        url_path='import-excel',
        parser_classes=[MultiPartParser, FormParser],
    )
    def import_excel(self, request, pk=None):
        """Import matched rows; unmatched and invalid rows are skipped."""
        spec = self.get_object()
        self._check_not_locked(spec)
        rows, errors, summary = self._read_upload(request)

        items = {
            str(item.id): item
            for item in NomenclatureItem.objects.filter(
                id__in=[r['nomenclature_item'] for r in rows if r['can_import']]
            )
        }

        created_ids = []
        with transaction.atomic():
            order_index = next_order_index(spec.rows.aggregate(m=Max('order_index'))['m'])
            for r in rows:
                if not r['can_import']:
                    continue
                item = items[r['nomenclature_item']]
                quantity = Decimal(r['quantity'])
                price = Decimal(r['price']) if r['price'] is not None else item.price
                row = Specification.objects.create(
                    product_specification=spec,
                    nomenclature_item=item,
                    name=item.name,
                    designation=item.designation,
                    description=item.description,
                    unit_id=item.unit_id,
                    quantity=quantity,
                    price=price,
                    total_price=Specification.calculate_total(price, quantity),
                    order_index=order_index,
                    created_by=request.user,
                    updated_by=request.user,
                )
                created_ids.append(str(row.id))
                order_index += 1
            spec.recalculate_total()

        skipped = [
            {'row': r['row'], 'name': r['name'], 'row_errors': r['row_errors']}
            for r in rows if not r['can_import']
        ]
        logger.info('Imported %s rows into specification %s', len(created_ids), spec.pk)
        return Response(
            {
                'created': len(created_ids),
                'created_ids': created_ids,
                'skipped': skipped,
                'errors': [e.to_dict() for e in errors],
                'summary': summary,
            },
            status=status.HTTP_201_CREATED
        )


class SpecificationViewSet(BaseModelViewSet):
    """
    ViewSet for specification rows.

    Endpoints:
    - GET|POST /product-specifications/{id}/specifications/
    - GET|PUT|PATCH|DELETE /specifications/{id}/
    - PUT /specifications/reorder/

    Every change recalculates the specification total.
    """

    serializer_class = SpecificationSerializer
    ordering = ['order_index', 'created_at']

    def get_queryset(self):
        queryset = Specification.objects.filter(
            product_specification__product__project__owner=self.request.user
        ).select_related('product_specification', 'nomenclature_item', 'unit')
        if 'spec_pk' in self.kwargs:
            queryset = queryset.filter(product_specification_id=self.kwargs['spec_pk'])
        return queryset.order_by('order_index', 'created_at')

    def get_owned_specification(self):
        spec_pk = self.kwargs.get('spec_pk')
        spec = ProductSpecification.objects.filter(
            pk=spec_pk,
            product__project__owner=self.request.user,
        ).first()
        if spec is None:
            raise EntityNotFoundException('Спецификация', spec_pk, 'Спецификация не найдена')
        return spec

    def _check_not_locked(self, spec):
        if spec.is_locked:
            raise EntityLockedException(
                'Спецификация', spec.pk, 'Спецификация заблокирована для изменений'
            )

    def list(self, request, *args, **kwargs):
        self.get_owned_specification()
        return super().list(request, *args, **kwargs)

    def perform_create(self, serializer):
        spec = self.get_owned_specification()
        self._check_not_locked(spec)
        with transaction.atomic():
            current_max = spec.rows.aggregate(m=Max('order_index'))['m']
            serializer.save(
                product_specification=spec,
                order_index=next_order_index(current_max),
                created_by=self.request.user,
                updated_by=self.request.user,
            )
            spec.recalculate_total()

    def perform_update(self, serializer):
        spec = serializer.instance.product_specification
        self._check_not_locked(spec)
        with transaction.atomic():
            super().perform_update(serializer)
            spec.recalculate_total()

    def perform_destroy(self, instance):
        spec = instance.product_specification
        self._check_not_locked(spec)
        with transaction.atomic():
            instance.delete()
            spec.recalculate_total()

    @action(detail=False, methods=['put'])
    def reorder(self, request):
        """Bulk reorder: {"specification_orders": [{"id", "order_index"}]}."""
        orders = parse_order_entries(request.data.get('specification_orders'), 'specification_orders')
        ids = list(orders.keys())

        with transaction.atomic():
            rows = list(
                Specification.objects.select_for_update()
                .filter(id__in=ids)
                .select_related('product_specification__product__project')
            )
            missing = find_missing_ids(ids, [r.id for r in rows])
            if missing:
                raise EntitiesNotFoundException('Строка спецификации', missing)
            for row in rows:
                spec = row.product_specification
                if spec.product.project.owner_id != request.user.id:
                    raise AuthorizationException('reorder', 'Строка спецификации')
                self._check_not_locked(spec)
            for row_id, order_index in orders.items():
                Specification.objects.filter(id=row_id).update(order_index=order_index)

        logger.info('Reordered %s specification rows', len(ids))
        return Response({'updated': len(ids)})
