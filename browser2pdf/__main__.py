from browser2pdf.main import cli

cli()
