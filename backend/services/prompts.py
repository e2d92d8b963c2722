"""
Prompt text for intervention extraction.
Reports are written in Spanish and Portuguese, so the instructions are in Spanish.
"""

SYSTEM_PROMPT = "Sos un asistente técnico que resume intervenciones de pozos petroleros en español con precisión."

OUTPUT_SCHEMA = """
[Objetivo]
Devolvé SOLO un objeto JSON con esta forma:
{
  "resumen": string,
  "punzados": [ { "desde": number|null, "hasta": number|null, "unidad": "m"|string|null } ],
  "tests": [
    {
      "nombre": string|null, "numero": string|null, "fecha": string|null,
      "intervalo": { "desde": number|null, "hasta": number|null, "unidad": string|null }|null,
      "fluidoRecuperado": string|null,
      "totalRecuperado": { "valor": number|null, "unidad": string|null }|null,
      "recuperadoTexto": string|null, "vazao": string|null, "swab": string|null,
      "nivelFluido": string|null, "salinidad": string|null, "bsw": string|null,
      "gradosAPI": string|null, "presion": string|null, "sopro": string|null,
      "observacion": string|null
    }
  ],
  "cementaciones": [
    {
      "tipo": "cementacion" | "squeeze" | "tampon_cemento" | "bpp",
      "intervalo": { "desde": number|null, "hasta": number|null, "unidad": string|null }|null,
      "profundidad": number|null, "unidadProfundidad": string|null,
      "zona": string|null, "observacion": string|null
    }
  ],
  "estimulaciones": [
    {
      "tipo": "acidizacion" | "fractura" | "minifractura", "fecha": string|null,
      "intervalo": { "desde": number|null, "hasta": number|null, "unidad": string|null }|null,
      "fluido": string|null, "presionInicial": string|null, "presionMedia": string|null,
      "presionFinal": string|null, "vazao": string|null,
      "volumen": { "valor": number|null, "unidad": string|null }|null,
      "observacion": string|null
    }
  ]
}
""".strip()

RULES = """
[Punzados]
- Registrá un punzado solo si el texto dice que se realizó (canhoneado, punzado, perforado, tiros, disparos).
- Listar intervalos o zonas sin verbo de punzado NO es un punzado. Sin declaración explícita devolvé [].

[Tests]
- "intervalo" siempre presente: rango explícito, o profundidad puntual (PACKER a 637,50 m → desde=hasta=637.5),
  o el rango de la zona citada (CPS-01 ...), o el "Int. a/b m" principal del bloque.
- "vazao" solo con unidades de volumen/tiempo (m3/d, bbl/d, BPD, MPCD, BPM, L/s, Qt=).
  Índices o presiones NO son vazão: "IP = 0,126 m3/d/kg/cm2" NO va en "vazao".
- Usá "óleo" (no "aceite"). Salinidad, BSW y ºAPI van en sus campos.
- Resultado "seco": "fluidoRecuperado" null y anotalo en "observacion".

[Cementaciones]
- Cementación, squeeze o tampón de cemento solo sobre intervalos punzados, con rango en el mismo evento.
- BPP (tampón mecánico): incluir siempre, con "profundidad" puntual e "intervalo" null.
- PACKER, BPR, RTTS NO son BPP. Pasta de cemento para asentar PACKERS no es cementación.

[Estimulaciones]
- Minifractura, fractura o acidización con su fecha, intervalo y fluido si aparecen.

[Resumen]
- Mencioná siempre punzados, ensayos (TF, TFR, DST, inyectividad, swab), cementaciones/BPP y estimulaciones presentes.
""".strip()

STYLE = {
    "breve": "Resumen breve (1–2 frases).",
    "extendido": "Resumen extendido (3–6 frases).",
}


def build_messages(text: str, fecha_texto: str | None, mode: str) -> list:
    """Chat messages for one intervention block."""
    user = f"{STYLE[mode]}\n\n{OUTPUT_SCHEMA}\n\n{RULES}\n\nFechaTexto: {fecha_texto or 'N/A'}\n\nTEXTO:\n{text}"
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user},
    ]
