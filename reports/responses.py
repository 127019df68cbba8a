from django.http import HttpResponse

PDF_CONTENT_TYPE = 'application/pdf'
XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


def file_response(content, filename, content_type):
    response = HttpResponse(content, content_type=content_type)
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


def pdf_response(content, filename):
    return file_response(content, filename, PDF_CONTENT_TYPE)


def xlsx_response(content, filename):
    return file_response(content, filename, XLSX_CONTENT_TYPE)
